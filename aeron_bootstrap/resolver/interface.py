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
Advertised address selection for multi-homed pods.

Attachments are scanned in annotation order and the first address-bearing
attachment matched by any strategy decides the address, so an earlier
attachment always wins over a later one. Each strategy is a predicate over a
network attachment, tried per attachment in priority order:

1. network name override (``AERON_MD_SECONDARY_INTERFACE_NETWORK_NAME``)
2. interface name override (``AERON_MD_SECONDARY_INTERFACE_NAME``)
3. default secondary interface (``net1``)

Pods without attachments, and pods where nothing matches, fall back to their
primary ``status.podIP``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from aeron_bootstrap.resolver.annotations import attachments_for
from aeron_bootstrap.resolver.models import (
    CandidateRecord,
    NetworkAttachment,
    ResolutionPolicy,
)
from aeron_bootstrap.utils.logger import logger


@dataclass(frozen=True)
class ResolutionStrategy:
    """A named rule selecting an attachment."""

    name: str
    matches: Callable[[NetworkAttachment], bool]


def build_strategies(policy: ResolutionPolicy) -> List[ResolutionStrategy]:
    """Build the strategy list for ``policy`` in priority order."""
    strategies = []

    if policy.network_name:
        network_name = policy.network_name
        strategies.append(ResolutionStrategy(
            name=f"network name {network_name}",
            matches=lambda attachment: attachment.name == network_name,
        ))

    if policy.interface_name:
        interface_name = policy.interface_name
        strategies.append(ResolutionStrategy(
            name=f"interface {interface_name}",
            matches=lambda attachment: attachment.interface == interface_name,
        ))

    default_interface = policy.default_interface
    strategies.append(ResolutionStrategy(
        name=f"default interface {default_interface}",
        matches=lambda attachment: attachment.interface == default_interface,
    ))

    return strategies


class InterfaceResolver:
    """Chooses the address a pod is advertised at.

    The same resolver is used for every neighbor and for the local pod.

    Example:
        >>> resolver = InterfaceResolver(ResolutionPolicy(interface_name="net2"))
        >>> address = resolver.resolve(record)
    """

    def __init__(self, policy: Optional[ResolutionPolicy] = None) -> None:
        self.policy = policy or ResolutionPolicy()
        self.strategies = build_strategies(self.policy)

    def select(self, attachments: Sequence[NetworkAttachment]) -> Optional[str]:
        """Return the address chosen from ``attachments``, or None."""
        for attachment in attachments:
            if not attachment.has_address:
                continue
            for strategy in self.strategies:
                if strategy.matches(attachment):
                    logger.debug(
                        f"Matched {strategy.name} on attachment {attachment.name} "
                        f"({attachment.interface})"
                    )
                    return attachment.first_address
        return None

    def resolve(self, record: CandidateRecord) -> str:
        """Resolve the advertised address of ``record``.

        Returns:
            The selected address, or an empty string if the pod has none

        Raises:
            MalformedNetworkStatusError: If the status annotation cannot be parsed
        """
        attachments = attachments_for(record)

        if not attachments:
            logger.debug(f"No network status annotation found for pod {record.name}, using status.podIP")
            return record.pod_ip

        address = self.select(attachments)
        if address is not None:
            logger.info(f"Pod {record.name} resolved to {address} via secondary interface")
            return address

        logger.info(
            f"network-status annotation found for pod {record.name} but no attachment "
            f"matched ({', '.join(s.name for s in self.strategies)}), "
            f"falling back to status.podIP"
        )
        return record.pod_ip
