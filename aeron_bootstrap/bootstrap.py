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
Bootstrap neighbor discovery run.

One run takes a snapshot of the media driver pods, builds the neighbor list,
resolves the address the local driver advertises and writes the resolver
properties file. Nothing is written when a run fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from aeron_bootstrap.artifact import BootstrapArtifact, write_bootstrap_properties
from aeron_bootstrap.cluster.catalog import PodCatalog
from aeron_bootstrap.config import BootstrapConfig
from aeron_bootstrap.exceptions import ConfigurationError
from aeron_bootstrap.resolver.interface import InterfaceResolver
from aeron_bootstrap.resolver.models import PeerSet
from aeron_bootstrap.resolver.peers import PeerSetBuilder
from aeron_bootstrap.utils.logger import logger


@dataclass(frozen=True)
class BootstrapResult:
    """Outcome of a successful run.

    Attributes:
        peer_set: Bootstrap neighbors
        resolver_name: Fully qualified local resolver name
        resolver_interface: Address the local driver advertises
        content: Rendered properties file
        path: File written, None for a dry run
    """

    peer_set: PeerSet
    resolver_name: str
    resolver_interface: str
    content: str
    path: Optional[Path] = None


def resolve_local_interface(config: BootstrapConfig, catalog: PodCatalog) -> str:
    """Resolve the address of the local pod.

    Uses the same policy as the neighbors. Falls back to the short hostname
    when the pod cannot be found or has no address yet.
    """
    record = catalog.get_candidate(config.namespace, config.hostname)
    if record is None:
        logger.warning(f"Local pod {config.hostname} not found, advertising hostname")
        return config.hostname

    address = InterfaceResolver(config.policy).resolve(record)
    if not address:
        logger.warning(f"Local pod {config.hostname} has no IP address yet, advertising hostname")
        return config.hostname

    return address


def run_bootstrap(
    config: BootstrapConfig,
    catalog: PodCatalog,
    write: bool = True,
) -> BootstrapResult:
    """Run bootstrap neighbor discovery once.

    Args:
        config: Bootstrap configuration
        catalog: Pod source
        write: Write the properties file, False for a dry run

    Returns:
        The run result

    Raises:
        ConfigurationError: If the configuration is invalid
        CatalogFetchError: If pods cannot be read
        MalformedNetworkStatusError: If a pod has an unparseable network-status
        NoPeersFoundError: If no usable media driver pod exists
        ArtifactWriteError: If the properties file cannot be written
    """
    errors = config.validate()
    if errors:
        raise ConfigurationError(errors=errors)

    candidates = catalog.list_candidates(config.namespace, config.label_selector)

    builder = PeerSetBuilder(
        config.policy,
        max_peers=config.max_peers,
        label_selector=config.label_selector,
    )
    peer_set = builder.build(candidates)

    resolver_interface = resolve_local_interface(config, catalog)

    artifact = BootstrapArtifact(
        neighbor_addresses=tuple(peer_set.addresses),
        port=config.discovery_port,
        resolver_name=config.resolver_name,
        resolver_interface=resolver_interface,
    )
    content = artifact.render()

    path = None
    if write:
        path = write_bootstrap_properties(config.bootstrap_path, content)
        logger.info(
            f"Created {path} with bootstrap neighbors: {','.join(artifact.neighbors)}, "
            f"media-driver name: {artifact.resolver_name}, "
            f"interface: {resolver_interface}:{config.discovery_port}"
        )

    return BootstrapResult(
        peer_set=peer_set,
        resolver_name=artifact.resolver_name,
        resolver_interface=resolver_interface,
        content=content,
        path=path,
    )
