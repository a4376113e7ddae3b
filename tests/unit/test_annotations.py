# Copyright 2026 Firefly Software Solutions Inc
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for Multus annotation parsing."""

import pytest

from aeron_bootstrap.exceptions import MalformedNetworkStatusError
from aeron_bootstrap.resolver.annotations import (
    attachments_for,
    parse_network_status,
    parse_requested_networks,
    requested_networks_for,
)
from aeron_bootstrap.resolver.models import RequestedNetwork


class TestParseRequestedNetworks:
    """Tests for the networks request annotation."""

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            ("", []),
            ("mynet", ["mynet"]),
            ("mynet1,mynet2", ["mynet1", "mynet2"]),
            ("mynet1, mynet2, mynet3", ["mynet1", "mynet2", "mynet3"]),
            ('[{"name":"mynet1"},{"name":"mynet2"}]', ["mynet1", "mynet2"]),
            ('[{"name":"custom-network"}]', ["custom-network"]),
        ],
    )
    def test_accepted_encodings(self, annotation, expected):
        """Test bare, comma-separated and JSON array encodings."""
        result = parse_requested_networks(annotation)

        assert [n.name for n in result] == expected

    def test_none(self):
        """Test absent annotation."""
        assert parse_requested_networks(None) == []

    def test_empty_elements_discarded(self):
        """Test empty CSV elements are dropped."""
        result = parse_requested_networks(" a, ,b,, ")

        assert result == [RequestedNetwork("a"), RequestedNetwork("b")]

    def test_duplicates_preserved(self):
        """Test duplicates keep their order."""
        result = parse_requested_networks("a,b,a")

        assert [n.name for n in result] == ["a", "b", "a"]

    def test_json_entries_without_name_skipped(self):
        """Test JSON entries without a string name are skipped."""
        result = parse_requested_networks(
            '[{"name":"a","interface":"net1"},{"interface":"net2"},{"name":5},"b",{"name":"c"}]'
        )

        assert [n.name for n in result] == ["a", "c"]

    def test_invalid_json_falls_back_to_csv(self):
        """Test broken JSON is read as a comma-separated list."""
        result = parse_requested_networks('[{"name":"a"')

        assert [n.name for n in result] == ['[{"name":"a"']

    def test_json_scalar_falls_back_to_csv(self):
        """Test JSON that is not an array is read as a name."""
        result = parse_requested_networks("42")

        assert [n.name for n in result] == ["42"]


class TestParseNetworkStatus:
    """Tests for the network-status annotation."""

    def test_empty(self):
        """Test empty and absent annotations."""
        assert parse_network_status("") == []
        assert parse_network_status(None) == []
        assert parse_network_status("   ") == []
        assert parse_network_status("null") == []

    def test_parse_attachments(self):
        """Test attachments are parsed in order, extra fields ignored."""
        raw = (
            '[{"name":"aws-cni","interface":"eth0","ips":["10.190.223.111"],"default":true,"dns":{}},'
            '{"name":"aws-cni","interface":"dummy9e99c8bc34f","mac":"0","dns":{}},'
            '{"name":"custom-network","interface":"net1","ips":["10.0.0.2"],'
            '"mac":"02:4a:ef:75:4e:00","dns":{}}]'
        )

        result = parse_network_status(raw)

        assert len(result) == 3
        assert result[0].interface == "eth0"
        assert result[0].ips == ["10.190.223.111"]
        assert result[1].ips == []
        assert result[1].has_address is False
        assert result[2].name == "custom-network"
        assert result[2].first_address == "10.0.0.2"

    def test_null_ips(self):
        """Test explicit null ips."""
        result = parse_network_status('[{"name":"n","interface":"net1","ips":null}]')

        assert result[0].ips == []

    def test_invalid_json(self):
        """Test invalid JSON raises."""
        with pytest.raises(MalformedNetworkStatusError) as exc_info:
            parse_network_status("not json", pod_name="aeron-1")

        assert exc_info.value.pod_name == "aeron-1"
        assert "aeron-1" in str(exc_info.value)

    def test_not_an_array(self):
        """Test a JSON object is rejected."""
        with pytest.raises(MalformedNetworkStatusError):
            parse_network_status('{"name":"n"}')

    def test_wrong_field_type(self):
        """Test ips must be a list of strings."""
        with pytest.raises(MalformedNetworkStatusError):
            parse_network_status('[{"name":"n","interface":"net1","ips":"10.0.0.1"}]')

    def test_error_is_not_retryable(self):
        """Test malformed status is fatal."""
        with pytest.raises(MalformedNetworkStatusError) as exc_info:
            parse_network_status("[")

        assert exc_info.value.retryable is False


class TestRecordAccessors:
    """Tests for reading annotations from records."""

    def test_record_without_annotations(self, record_factory):
        """Test single-homed pod."""
        record = record_factory("aeron-1", "10.0.0.1")

        assert attachments_for(record) == []
        assert requested_networks_for(record) == []

    def test_record_with_annotations(self, record_factory, status_factory):
        """Test annotations are read from the record."""
        record = record_factory(
            "aeron-1",
            "10.0.0.1",
            requested="mynet",
            status=status_factory({"name": "mynet", "interface": "net1", "ips": ["10.0.0.2"]}),
        )

        assert [n.name for n in requested_networks_for(record)] == ["mynet"]
        assert attachments_for(record)[0].first_address == "10.0.0.2"

    def test_malformed_status_names_pod(self, record_factory):
        """Test the error carries the pod name."""
        record = record_factory("aeron-bad", "10.0.0.1", status="{broken")

        with pytest.raises(MalformedNetworkStatusError) as exc_info:
            attachments_for(record)

        assert exc_info.value.pod_name == "aeron-bad"
