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

"""Bootstrap neighbor selection."""

from __future__ import annotations

from typing import Iterable, List, Optional

from aeron_bootstrap.exceptions import NoPeersFoundError
from aeron_bootstrap.resolver.interface import InterfaceResolver
from aeron_bootstrap.resolver.models import (
    CandidateRecord,
    PeerSet,
    ResolutionPolicy,
    ResolvedPeer,
)
from aeron_bootstrap.resolver.validation import validate_candidate
from aeron_bootstrap.utils.logger import logger


class PeerSetBuilder:
    """Turns candidate pods into the ordered bootstrap neighbor list.

    Pods failing Multus validation or without any address are dropped, the
    rest are ordered oldest first and capped at ``max_peers`` (0 means no
    cap).

    Example:
        >>> builder = PeerSetBuilder(ResolutionPolicy(), max_peers=3)
        >>> peer_set = builder.build(records)
        >>> peer_set.addresses
        ['10.0.0.1', '10.0.0.2', '10.0.0.3']
    """

    def __init__(
        self,
        policy: Optional[ResolutionPolicy] = None,
        max_peers: int = 0,
        label_selector: Optional[str] = None,
    ) -> None:
        """Initialize the builder.

        Args:
            policy: Interface resolution policy
            max_peers: Maximum number of neighbors, 0 for unlimited
            label_selector: Selector the candidates were listed with, for diagnostics
        """
        if max_peers < 0:
            raise ValueError("max_peers must be >= 0")
        self.resolver = InterfaceResolver(policy)
        self.max_peers = max_peers
        self.label_selector = label_selector

    def build(self, candidates: Iterable[CandidateRecord]) -> PeerSet:
        """Build the peer set.

        Raises:
            NoPeersFoundError: If no candidate survives
            MalformedNetworkStatusError: If any candidate has an unparseable
                network-status annotation
        """
        survivors: List[ResolvedPeer] = []
        rejected = 0

        for record in candidates:
            if not validate_candidate(record):
                rejected += 1
                continue

            address = self.resolver.resolve(record)
            if not address:
                logger.debug(f"Pod {record.name} has no IP address yet, skipping")
                rejected += 1
                continue

            survivors.append(ResolvedPeer(
                name=record.name,
                address=address,
                created_at=record.created_at,
            ))
            logger.info(f"Found media driver pod: {record.name} created at {record.created_at}")

        if not survivors:
            logger.warning("No media driver pods with IP addresses found")
            raise NoPeersFoundError(rejected=rejected, label_selector=self.label_selector)

        # sorted() is stable, equal timestamps keep listing order
        survivors = sorted(survivors, key=lambda peer: peer.created_at)

        truncated = 0
        if self.max_peers > 0 and len(survivors) > self.max_peers:
            truncated = len(survivors) - self.max_peers
            logger.info(f"Limited to {self.max_peers} oldest pods (out of {len(survivors)} total)")
            survivors = survivors[:self.max_peers]

        logger.info(f"Found {len(survivors)} media driver pods with IP addresses")
        for peer in survivors:
            logger.info(f"Pod: {peer.name} ({peer.address})")

        return PeerSet(peers=tuple(survivors), rejected=rejected, truncated=truncated)
