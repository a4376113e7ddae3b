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
Data structures shared by the peer resolution pipeline.

Pod snapshots come in as :class:`CandidateRecord`, Multus annotations are
decoded into :class:`NetworkAttachment` / :class:`RequestedNetwork`, and the
pipeline hands back a :class:`PeerSet` of :class:`ResolvedPeer`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# Interface name Multus assigns to the first secondary attachment
DEFAULT_SECONDARY_INTERFACE = "net1"


@dataclass(frozen=True)
class CandidateRecord:
    """Snapshot of one media driver pod.

    Attributes:
        name: Pod name
        created_at: Creation timestamp assigned by the API server
        pod_ip: Primary pod IP (``status.podIP``), empty while pending
        namespace: Pod namespace
        labels: Pod labels
        annotations: Pod annotations
    """

    name: str
    created_at: datetime
    pod_ip: str = ""
    namespace: str = ""
    labels: Mapping[str, str] = field(default_factory=dict)
    annotations: Mapping[str, str] = field(default_factory=dict)


class NetworkAttachment(BaseModel):
    """One entry of the ``k8s.v1.cni.cncf.io/network-status`` annotation.

    Only the fields the resolver needs are modelled; ``mac``, ``default``,
    ``dns`` and friends are ignored.
    """

    name: str = Field("", description="Network attachment name, possibly namespace-qualified")
    interface: str = Field("", description="Interface name inside the pod")
    ips: List[str] = Field(default_factory=list, description="Addresses on the interface")

    @field_validator("name", "interface", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("ips", mode="before")
    @classmethod
    def _none_as_no_ips(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def has_address(self) -> bool:
        return bool(self.ips)

    @property
    def first_address(self) -> str:
        return self.ips[0] if self.ips else ""


@dataclass(frozen=True)
class RequestedNetwork:
    """One network named in the ``k8s.v1.cni.cncf.io/networks`` annotation."""

    name: str


@dataclass(frozen=True)
class ResolutionPolicy:
    """Which attachment a pod advertises.

    ``network_name`` wins over ``interface_name`` when both are set; the
    default interface is consulted last.
    """

    network_name: Optional[str] = None
    interface_name: Optional[str] = None
    default_interface: str = DEFAULT_SECONDARY_INTERFACE


@dataclass(frozen=True)
class ResolvedPeer:
    """A media driver pod with the address it will be gossiped at."""

    name: str
    address: str
    created_at: datetime


@dataclass(frozen=True)
class PeerSet:
    """Ordered, capped result of peer discovery.

    Attributes:
        peers: Peers ordered oldest first
        rejected: Candidates dropped by validation or without an address
        truncated: Candidates dropped by the peer cap
    """

    peers: Tuple[ResolvedPeer, ...]
    rejected: int = 0
    truncated: int = 0

    @property
    def addresses(self) -> List[str]:
        return [peer.address for peer in self.peers]

    @property
    def names(self) -> List[str]:
        return [peer.name for peer in self.peers]

    def __len__(self) -> int:
        return len(self.peers)
