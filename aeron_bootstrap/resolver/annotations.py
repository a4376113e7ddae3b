# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Multus annotation parsing.

Two pod annotations describe secondary networks:

1. ``k8s.v1.cni.cncf.io/networks`` - what the pod asked for. Multus accepts
   a bare name, a comma-separated list or a JSON array of selection objects.
2. ``k8s.v1.cni.cncf.io/network-status`` - what the CNI actually attached,
   always a JSON array written by Multus.

Example:
    >>> parse_requested_networks("net-a, net-b")
    [RequestedNetwork(name='net-a'), RequestedNetwork(name='net-b')]
    >>> parse_requested_networks('[{"name": "net-a", "interface": "net1"}]')
    [RequestedNetwork(name='net-a')]
"""

from __future__ import annotations

import json
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from aeron_bootstrap.exceptions import MalformedNetworkStatusError
from aeron_bootstrap.resolver.models import (
    CandidateRecord,
    NetworkAttachment,
    RequestedNetwork,
)

NETWORKS_ANNOTATION = "k8s.v1.cni.cncf.io/networks"
NETWORK_STATUS_ANNOTATION = "k8s.v1.cni.cncf.io/network-status"

_status_adapter = TypeAdapter(Optional[List[NetworkAttachment]])


def parse_network_status(
    raw: Optional[str],
    pod_name: Optional[str] = None,
) -> List[NetworkAttachment]:
    """Parse the network-status annotation.

    Args:
        raw: Annotation value, ``None`` when the annotation is absent
        pod_name: Pod the annotation belongs to, used in the error message

    Returns:
        Attachments in annotation order; empty for an absent, blank or
        ``null`` annotation

    Raises:
        MalformedNetworkStatusError: If the value is not a JSON array of
            attachment objects
    """
    if raw is None or not raw.strip():
        return []

    try:
        attachments = _status_adapter.validate_json(raw)
    except ValidationError as e:
        raise MalformedNetworkStatusError(
            f"Error parsing network status: {e.error_count()} validation error(s)",
            pod_name=pod_name,
        ) from e

    return attachments or []


def parse_requested_networks(raw: Optional[str]) -> List[RequestedNetwork]:
    """Parse the networks request annotation.

    The JSON array form is tried first; anything that is not a JSON array is
    read as a comma-separated list of names. Never raises.
    """
    if raw is None or not raw.strip():
        return []

    try:
        decoded = json.loads(raw)
    except ValueError:
        decoded = None

    if isinstance(decoded, list):
        return [
            RequestedNetwork(name=entry["name"])
            for entry in decoded
            if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        ]

    return [
        RequestedNetwork(name=part.strip())
        for part in raw.split(",")
        if part.strip()
    ]


def attachments_for(record: CandidateRecord) -> List[NetworkAttachment]:
    """Network attachments reported for ``record``."""
    return parse_network_status(
        record.annotations.get(NETWORK_STATUS_ANNOTATION),
        pod_name=record.name,
    )


def requested_networks_for(record: CandidateRecord) -> List[RequestedNetwork]:
    """Networks ``record`` asked Multus for."""
    return parse_requested_networks(record.annotations.get(NETWORKS_ANNOTATION))
