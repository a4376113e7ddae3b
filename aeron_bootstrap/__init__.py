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
aeron-k8s-bootstrap - Kubernetes startup shim for Aeron media drivers.

Discovers sibling media driver pods, picks the address each one is reachable
at (including Multus secondary networks) and writes the driver name resolver
bootstrap properties.
"""

__version__ = "0.3.0"
__license__ = "Apache-2.0"

from aeron_bootstrap.artifact import (
    BootstrapArtifact,
    render_bootstrap_properties,
    write_bootstrap_properties,
)
from aeron_bootstrap.bootstrap import BootstrapResult, run_bootstrap
from aeron_bootstrap.config import BootstrapConfig
from aeron_bootstrap.exceptions import (
    ArtifactWriteError,
    BootstrapError,
    CatalogFetchError,
    ConfigurationError,
    MalformedNetworkStatusError,
    NoPeersFoundError,
)
from aeron_bootstrap.resolver import (
    CandidateRecord,
    InterfaceResolver,
    PeerSet,
    PeerSetBuilder,
    ResolutionPolicy,
    ResolvedPeer,
)

__all__ = [
    # Pipeline
    "CandidateRecord",
    "InterfaceResolver",
    "PeerSet",
    "PeerSetBuilder",
    "ResolutionPolicy",
    "ResolvedPeer",
    # Artifact
    "BootstrapArtifact",
    "render_bootstrap_properties",
    "write_bootstrap_properties",
    # Run
    "BootstrapConfig",
    "BootstrapResult",
    "run_bootstrap",
    # Errors
    "ArtifactWriteError",
    "BootstrapError",
    "CatalogFetchError",
    "ConfigurationError",
    "MalformedNetworkStatusError",
    "NoPeersFoundError",
]
