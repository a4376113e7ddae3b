# Copyright 2026 Firefly Software Solutions Inc
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for bootstrap tests."""

import json
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from aeron_bootstrap.resolver.annotations import (
    NETWORK_STATUS_ANNOTATION,
    NETWORKS_ANNOTATION,
)
from aeron_bootstrap.resolver.models import CandidateRecord

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_record(
    name: str,
    ip: str = "",
    minutes_ago: float = 5,
    namespace: str = "test-namespace",
    requested: Optional[str] = None,
    status: Optional[str] = None,
) -> CandidateRecord:
    annotations: Dict[str, str] = {}
    if requested is not None:
        annotations[NETWORKS_ANNOTATION] = requested
    if status is not None:
        annotations[NETWORK_STATUS_ANNOTATION] = status
    return CandidateRecord(
        name=name,
        created_at=NOW - timedelta(minutes=minutes_ago),
        pod_ip=ip,
        namespace=namespace,
        labels={"aeron.io/media-driver": "true"},
        annotations=annotations,
    )


def network_status(*entries: Dict) -> str:
    return json.dumps(list(entries))


class FakeCatalog:
    """In-memory pod catalog."""

    def __init__(self, records: Optional[List[CandidateRecord]] = None, fail_times: int = 0) -> None:
        self.records = list(records or [])
        self.list_calls = 0
        self.fail_times = fail_times

    def list_candidates(self, namespace: str, label_selector: str) -> List[CandidateRecord]:
        from aeron_bootstrap.exceptions import CatalogFetchError

        self.list_calls += 1
        if self.list_calls <= self.fail_times:
            raise CatalogFetchError("Failed to list pods: 503 Service Unavailable", namespace=namespace)
        return [
            r for r in self.records
            if r.namespace == namespace and r.labels.get("aeron.io/media-driver") == "true"
        ]

    def get_candidate(self, namespace: str, name: str) -> Optional[CandidateRecord]:
        for record in self.records:
            if record.namespace == namespace and record.name == name:
                return record
        return None


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def status_factory():
    return network_status


@pytest.fixture
def fake_catalog():
    return FakeCatalog
