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
Peer discovery and interface resolution.

Pipeline:
- annotations: Multus request/status annotation parsing
- validation: requested networks must be attached with an IP
- interface: which address a pod is advertised at
- peers: filtering, oldest-first ordering and capping
"""

from aeron_bootstrap.resolver.annotations import (
    NETWORK_STATUS_ANNOTATION,
    NETWORKS_ANNOTATION,
    attachments_for,
    parse_network_status,
    parse_requested_networks,
    requested_networks_for,
)
from aeron_bootstrap.resolver.interface import InterfaceResolver, ResolutionStrategy
from aeron_bootstrap.resolver.models import (
    DEFAULT_SECONDARY_INTERFACE,
    CandidateRecord,
    NetworkAttachment,
    PeerSet,
    RequestedNetwork,
    ResolutionPolicy,
    ResolvedPeer,
)
from aeron_bootstrap.resolver.peers import PeerSetBuilder
from aeron_bootstrap.resolver.validation import is_valid_multihoming, validate_candidate

__all__ = [
    # Annotations
    "NETWORKS_ANNOTATION",
    "NETWORK_STATUS_ANNOTATION",
    "attachments_for",
    "parse_network_status",
    "parse_requested_networks",
    "requested_networks_for",
    # Models
    "DEFAULT_SECONDARY_INTERFACE",
    "CandidateRecord",
    "NetworkAttachment",
    "PeerSet",
    "RequestedNetwork",
    "ResolutionPolicy",
    "ResolvedPeer",
    # Pipeline
    "InterfaceResolver",
    "PeerSetBuilder",
    "ResolutionStrategy",
    "is_valid_multihoming",
    "validate_candidate",
]
