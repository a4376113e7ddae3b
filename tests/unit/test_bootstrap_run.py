# Copyright 2026 Firefly Software Solutions Inc
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for a full bootstrap run against an in-memory catalog."""

import pytest

from aeron_bootstrap.bootstrap import resolve_local_interface, run_bootstrap
from aeron_bootstrap.config import BootstrapConfig
from aeron_bootstrap.exceptions import (
    ConfigurationError,
    MalformedNetworkStatusError,
    NoPeersFoundError,
)


@pytest.fixture
def config(tmp_path):
    return BootstrapConfig(
        namespace="test-namespace",
        hostname="aeron-0",
        bootstrap_path=str(tmp_path / "aeron" / "bootstrap.properties"),
    )


class TestRunBootstrap:
    """Tests for run_bootstrap."""

    def test_writes_properties_file(self, config, record_factory, fake_catalog):
        """Test a successful run writes the file."""
        catalog = fake_catalog([
            record_factory("aeron-0", "10.0.0.1", minutes_ago=10),
            record_factory("aeron-1", "10.0.0.2", minutes_ago=5),
        ])

        result = run_bootstrap(config, catalog)

        expected = (
            "aeron.driver.resolver.bootstrap.neighbor=10.0.0.1:8050,10.0.0.2:8050\n"
            "aeron.name.resolver.supplier=driver\n"
            "aeron.driver.resolver.name=aeron-0.test-namespace.aeron\n"
            "aeron.driver.resolver.interface=10.0.0.1:8050\n"
        )
        assert result.content == expected
        assert result.path is not None
        assert result.path.read_text() == expected
        assert result.resolver_name == "aeron-0.test-namespace.aeron"
        assert result.resolver_interface == "10.0.0.1"

    def test_other_namespace_ignored(self, config, record_factory, fake_catalog):
        """Test pods outside the namespace are not neighbors."""
        catalog = fake_catalog([
            record_factory("aeron-0", "10.0.0.1"),
            record_factory("aeron-x", "10.9.0.1", namespace="other"),
        ])

        result = run_bootstrap(config, catalog)

        assert result.peer_set.addresses == ["10.0.0.1"]

    def test_max_peers(self, tmp_path, record_factory, fake_catalog):
        """Test the neighbor list is capped to the oldest pods."""
        config = BootstrapConfig(
            namespace="test-namespace",
            hostname="aeron-0",
            max_peers=2,
            discovery_port=9090,
            bootstrap_path=str(tmp_path / "bootstrap.properties"),
        )
        catalog = fake_catalog([
            record_factory("aeron-2", "10.0.0.3", minutes_ago=1),
            record_factory("aeron-0", "10.0.0.1", minutes_ago=9),
            record_factory("aeron-1", "10.0.0.2", minutes_ago=5),
        ])

        result = run_bootstrap(config, catalog)

        assert result.content.splitlines()[0] == (
            "aeron.driver.resolver.bootstrap.neighbor=10.0.0.1:9090,10.0.0.2:9090"
        )

    def test_secondary_interface(self, config, record_factory, status_factory, fake_catalog):
        """Test neighbors and the local pod advertise the secondary address."""
        status = status_factory(
            {"name": "aws-cni", "interface": "eth0", "ips": ["10.190.0.1"]},
            {"name": "test-namespace/aeron", "interface": "net1", "ips": ["192.168.1.10"]},
        )
        catalog = fake_catalog([
            record_factory("aeron-0", "10.190.0.1", requested="aeron", status=status),
        ])

        result = run_bootstrap(config, catalog)

        assert result.peer_set.addresses == ["192.168.1.10"]
        assert result.resolver_interface == "192.168.1.10"
        assert "aeron.driver.resolver.interface=192.168.1.10:8050\n" in result.content

    def test_dry_run_writes_nothing(self, config, record_factory, fake_catalog, tmp_path):
        """Test write=False only renders."""
        catalog = fake_catalog([record_factory("aeron-0", "10.0.0.1")])

        result = run_bootstrap(config, catalog, write=False)

        assert result.path is None
        assert "aeron.name.resolver.supplier=driver\n" in result.content
        assert not (tmp_path / "aeron").exists()

    def test_no_peers_writes_nothing(self, config, record_factory, fake_catalog, tmp_path):
        """Test no file is created when no pod qualifies."""
        catalog = fake_catalog([record_factory("aeron-0", "")])

        with pytest.raises(NoPeersFoundError):
            run_bootstrap(config, catalog)

        assert not (tmp_path / "aeron").exists()

    def test_malformed_status_writes_nothing(self, config, record_factory, fake_catalog, tmp_path):
        """Test a malformed annotation aborts the run."""
        catalog = fake_catalog([record_factory("aeron-0", "10.0.0.1", status="{broken")])

        with pytest.raises(MalformedNetworkStatusError):
            run_bootstrap(config, catalog)

        assert not (tmp_path / "aeron").exists()

    def test_invalid_config(self, record_factory, fake_catalog):
        """Test an invalid configuration is rejected before listing."""
        catalog = fake_catalog([record_factory("aeron-0", "10.0.0.1")])

        with pytest.raises(ConfigurationError):
            run_bootstrap(BootstrapConfig(namespace="", hostname="aeron-0"), catalog)

        assert catalog.list_calls == 0


class TestResolveLocalInterface:
    """Tests for resolve_local_interface."""

    def test_missing_local_pod(self, config, fake_catalog):
        """Test the hostname is advertised when the pod is not found."""
        assert resolve_local_interface(config, fake_catalog([])) == "aeron-0"

    def test_local_pod_without_ip(self, config, record_factory, fake_catalog):
        """Test the hostname is advertised when the pod has no IP."""
        catalog = fake_catalog([record_factory("aeron-0", "")])

        assert resolve_local_interface(config, catalog) == "aeron-0"

    def test_local_pod_ip(self, config, record_factory, fake_catalog):
        """Test the pod IP is advertised."""
        catalog = fake_catalog([record_factory("aeron-0", "10.0.0.7")])

        assert resolve_local_interface(config, catalog) == "10.0.0.7"

    def test_local_pod_not_a_neighbor_still_resolved(self, config, record_factory, fake_catalog, tmp_path):
        """Test the local pod resolves even when it is not a valid neighbor."""
        catalog = fake_catalog([
            record_factory("aeron-0", "10.0.0.7", requested="missing-net"),
            record_factory("aeron-1", "10.0.0.8"),
        ])

        result = run_bootstrap(config, catalog)

        assert result.peer_set.addresses == ["10.0.0.8"]
        assert result.resolver_interface == "10.0.0.7"
