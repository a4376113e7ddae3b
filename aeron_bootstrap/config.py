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
Bootstrap configuration.

The configuration is read once from the environment (and CLI flags) into an
immutable :class:`BootstrapConfig` that is passed explicitly through the
pipeline.
"""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from typing import List, Mapping, Optional

from aeron_bootstrap.resolver.models import ResolutionPolicy
from aeron_bootstrap.utils.logger import logger

NAMESPACE_FILE = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"

DEFAULT_LABEL_SELECTOR = "aeron.io/media-driver=true"
DEFAULT_BOOTSTRAP_PATH = "/etc/aeron/bootstrap.properties"
DEFAULT_HOSTNAME_SUFFIX = ".aeron"
DEFAULT_DISCOVERY_PORT = 8050
DEFAULT_NAMESPACE = "default"
DEFAULT_RETRY_DELAY = 2.0


def read_current_namespace(path: str = NAMESPACE_FILE) -> str:
    """Read the pod namespace from the mounted service account.

    Falls back to ``default`` when the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as f:
            namespace = f.read().strip()
    except OSError as e:
        logger.warning(f"Could not read namespace file, using '{DEFAULT_NAMESPACE}': {e}")
        return DEFAULT_NAMESPACE

    return namespace or DEFAULT_NAMESPACE


def current_hostname(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the pod hostname (the pod name under Kubernetes)."""
    env = os.environ if environ is None else environ
    hostname = env.get("HOSTNAME", "")
    if hostname:
        return hostname
    try:
        hostname = socket.gethostname()
    except OSError:
        hostname = ""
    if hostname:
        return hostname
    logger.warning("Could not determine hostname, using 'localhost'")
    return "localhost"


def _int_from_env(
    env: Mapping[str, str],
    key: str,
    default: int,
    minimum: int,
    maximum: Optional[int] = None,
) -> int:
    raw = env.get(key, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or value < minimum or (maximum is not None and value > maximum):
        logger.warning(f"Invalid {key} value '{raw}', using default {default}")
        return default
    return value


def _float_from_env(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if value < 0:
        logger.warning(f"Invalid {key} value '{raw}', using default {default}")
        return default
    return value


@dataclass(frozen=True)
class BootstrapConfig:
    """Configuration for one bootstrap run.

    Attributes:
        namespace: Namespace to search for media driver pods
        hostname: Local pod hostname (its pod name)
        label_selector: Label selector matching media driver pods
        max_peers: Maximum number of bootstrap neighbors, 0 for unlimited
        discovery_port: Resolver port used for neighbors and the local interface
        hostname_suffix: Suffix appended to ``hostname.namespace``, verbatim
        bootstrap_path: Where the properties file is written
        interface_name: Secondary interface name override
        network_name: Secondary network name override (wins over interface_name)
        retries: Extra attempts when no peers are found or the API fails
        retry_delay: Initial delay between attempts in seconds
    """

    namespace: str = DEFAULT_NAMESPACE
    hostname: str = "localhost"
    label_selector: str = DEFAULT_LABEL_SELECTOR
    max_peers: int = 0
    discovery_port: int = DEFAULT_DISCOVERY_PORT
    hostname_suffix: str = DEFAULT_HOSTNAME_SUFFIX
    bootstrap_path: str = DEFAULT_BOOTSTRAP_PATH
    interface_name: Optional[str] = None
    network_name: Optional[str] = None
    retries: int = 0
    retry_delay: float = DEFAULT_RETRY_DELAY

    @property
    def policy(self) -> ResolutionPolicy:
        """Interface resolution policy, empty overrides count as unset."""
        return ResolutionPolicy(
            network_name=self.network_name or None,
            interface_name=self.interface_name or None,
        )

    @property
    def resolver_name(self) -> str:
        """Fully qualified resolver name, e.g. ``server1.uat.aeron``."""
        return f"{self.hostname}.{self.namespace}{self.hostname_suffix}"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        namespace_file: str = NAMESPACE_FILE,
    ) -> "BootstrapConfig":
        """Create BootstrapConfig from environment variables.

        Environment variables:
            AERON_MD_NAMESPACE: Namespace to search (service account namespace if unset)
            AERON_MD_LABEL_SELECTOR: Media driver label selector
            AERON_MD_MAX_BOOTSTRAP_PODS: Maximum neighbors (0 = unlimited)
            AERON_MD_DISCOVERY_PORT: Resolver discovery port
            AERON_MD_HOSTNAME_SUFFIX: Resolver name suffix
            AERON_MD_BOOTSTRAP_PATH: Output properties file
            AERON_MD_SECONDARY_INTERFACE_NAME: Interface name override
            AERON_MD_SECONDARY_INTERFACE_NETWORK_NAME: Network name override
            AERON_MD_BOOTSTRAP_RETRIES: Extra attempts before giving up
            AERON_MD_BOOTSTRAP_RETRY_DELAY: Initial retry delay in seconds
            HOSTNAME: Local pod name

        Invalid numeric values are logged and replaced by their defaults.
        """
        env = os.environ if environ is None else environ

        namespace = env.get("AERON_MD_NAMESPACE", "") or read_current_namespace(namespace_file)

        return cls(
            namespace=namespace,
            hostname=current_hostname(env),
            label_selector=env.get("AERON_MD_LABEL_SELECTOR", "") or DEFAULT_LABEL_SELECTOR,
            max_peers=_int_from_env(env, "AERON_MD_MAX_BOOTSTRAP_PODS", 0, minimum=0),
            discovery_port=_int_from_env(
                env, "AERON_MD_DISCOVERY_PORT", DEFAULT_DISCOVERY_PORT, minimum=1, maximum=65535
            ),
            hostname_suffix=env.get("AERON_MD_HOSTNAME_SUFFIX", "") or DEFAULT_HOSTNAME_SUFFIX,
            bootstrap_path=env.get("AERON_MD_BOOTSTRAP_PATH", "") or DEFAULT_BOOTSTRAP_PATH,
            interface_name=env.get("AERON_MD_SECONDARY_INTERFACE_NAME") or None,
            network_name=env.get("AERON_MD_SECONDARY_INTERFACE_NETWORK_NAME") or None,
            retries=_int_from_env(env, "AERON_MD_BOOTSTRAP_RETRIES", 0, minimum=0),
            retry_delay=_float_from_env(env, "AERON_MD_BOOTSTRAP_RETRY_DELAY", DEFAULT_RETRY_DELAY),
        )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.namespace:
            errors.append("namespace is required")

        if not self.hostname:
            errors.append("hostname is required")

        if not self.label_selector:
            errors.append("label_selector is required")

        if self.discovery_port < 1 or self.discovery_port > 65535:
            errors.append("discovery_port must be between 1 and 65535")

        if self.max_peers < 0:
            errors.append("max_peers must be >= 0 (0 means unlimited)")

        if not self.bootstrap_path:
            errors.append("bootstrap_path is required")

        if self.retries < 0:
            errors.append("retries must be >= 0")

        if self.retry_delay < 0:
            errors.append("retry_delay must be >= 0")

        return errors
