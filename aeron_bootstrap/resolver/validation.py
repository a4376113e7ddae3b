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
Multus network validation.

A pod that requests secondary networks is only usable once Multus has
reported every one of them in ``network-status`` with an address. Until then
it would be advertised on the wrong interface (or none), so it is left out of
the bootstrap neighbors.
"""

from __future__ import annotations

from typing import Optional, Sequence

from aeron_bootstrap.resolver.annotations import attachments_for, requested_networks_for
from aeron_bootstrap.resolver.models import (
    CandidateRecord,
    NetworkAttachment,
    RequestedNetwork,
)
from aeron_bootstrap.utils.logger import logger


def _attachment_matches(attachment: NetworkAttachment, name: str, namespace: str) -> bool:
    # Multus reports attachments either as "name" or "namespace/name"
    return attachment.name == name or attachment.name == f"{namespace}/{name}"


def find_missing_network(
    requested: Sequence[RequestedNetwork],
    attachments: Sequence[NetworkAttachment],
    namespace: str,
) -> Optional[str]:
    """Return the first requested network without an IP-bearing attachment."""
    for network in requested:
        if not any(
            attachment.has_address
            and _attachment_matches(attachment, network.name, namespace)
            for attachment in attachments
        ):
            return network.name
    return None


def is_valid_multihoming(
    requested: Sequence[RequestedNetwork],
    attachments: Sequence[NetworkAttachment],
    namespace: str,
) -> bool:
    """Check that every requested network is attached with an address.

    Args:
        requested: Networks from the request annotation
        attachments: Attachments from the status annotation
        namespace: Pod namespace, for namespace-qualified attachment names

    Returns:
        True for single-homed pods and fully attached multi-homed pods
    """
    if not requested:
        return True
    return find_missing_network(requested, attachments, namespace) is None


def validate_candidate(record: CandidateRecord) -> bool:
    """Validate the Multus annotations of a pod.

    Raises:
        MalformedNetworkStatusError: If the status annotation cannot be parsed
    """
    requested = requested_networks_for(record)
    if not requested:
        return True

    attachments = attachments_for(record)
    missing = find_missing_network(requested, attachments, record.namespace)
    if missing is not None:
        logger.warning(
            f"Pod {record.name} requests network {missing} but network-status "
            f"has no matching attachment with an IP, skipping"
        )
        return False

    return True
