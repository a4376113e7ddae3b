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
Kubernetes pod catalog.

Lists media driver pods and reads the local pod through the Kubernetes API,
converting them to :class:`CandidateRecord` snapshots for the resolver.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional, Protocol

from kubernetes import client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from aeron_bootstrap.exceptions import CatalogFetchError
from aeron_bootstrap.resolver.models import CandidateRecord
from aeron_bootstrap.utils.logger import logger


class PodCatalog(Protocol):
    """Source of pod snapshots for one bootstrap run."""

    def list_candidates(self, namespace: str, label_selector: str) -> List[CandidateRecord]:
        ...

    def get_candidate(self, namespace: str, name: str) -> Optional[CandidateRecord]:
        ...


def record_from_pod(pod: Any) -> CandidateRecord:
    """Convert a ``V1Pod`` into a :class:`CandidateRecord`."""
    metadata = pod.metadata
    status = pod.status

    created_at = metadata.creation_timestamp
    if created_at is None:
        # Not yet persisted by the API server, sort it last
        created_at = datetime.now(timezone.utc)

    return CandidateRecord(
        name=metadata.name,
        created_at=created_at,
        pod_ip=(status.pod_ip if status is not None else None) or "",
        namespace=metadata.namespace or "",
        labels=dict(metadata.labels or {}),
        annotations=dict(metadata.annotations or {}),
    )


def load_core_api() -> client.CoreV1Api:
    """Create a CoreV1Api client, in-cluster config first, kubeconfig second."""
    try:
        k8s_config.load_incluster_config()
    except k8s_config.ConfigException:
        logger.debug("In-cluster config unavailable, loading kubeconfig")
        try:
            k8s_config.load_kube_config()
        except (k8s_config.ConfigException, OSError) as e:
            # Configuration failures are permanent
            raise CatalogFetchError(
                f"Failed to create Kubernetes client: {e}",
                retry_after=None,
            ) from e

    return client.CoreV1Api()


class KubernetesCatalog:
    """Pod catalog backed by the Kubernetes API.

    Example:
        >>> catalog = KubernetesCatalog()
        >>> records = catalog.list_candidates("uat", "aeron.io/media-driver=true")
    """

    def __init__(self, api: Optional[client.CoreV1Api] = None) -> None:
        """Initialize the catalog.

        Args:
            api: Preconfigured CoreV1Api, loaded from the environment if omitted
        """
        self._api = api

    @property
    def api(self) -> client.CoreV1Api:
        if self._api is None:
            self._api = load_core_api()
        return self._api

    def list_candidates(self, namespace: str, label_selector: str) -> List[CandidateRecord]:
        """List pods matching ``label_selector`` in ``namespace``.

        Raises:
            CatalogFetchError: If the API call fails
        """
        logger.info(
            f"Searching for media driver pods in namespace: {namespace} "
            f"with label selector: {label_selector}"
        )
        try:
            pods = self.api.list_namespaced_pod(namespace, label_selector=label_selector)
        except ApiException as e:
            raise CatalogFetchError(
                f"Failed to list pods: {e.status} {e.reason}",
                namespace=namespace,
            ) from e
        except HTTPError as e:
            raise CatalogFetchError(f"Failed to list pods: {e}", namespace=namespace) from e

        records = [record_from_pod(pod) for pod in pods.items or []]
        logger.debug(f"API returned {len(records)} pods")
        return records

    def get_candidate(self, namespace: str, name: str) -> Optional[CandidateRecord]:
        """Read a single pod, returning None if it does not exist.

        Raises:
            CatalogFetchError: If the API call fails for any other reason
        """
        try:
            pod = self.api.read_namespaced_pod(name, namespace)
        except ApiException as e:
            if e.status == 404:
                logger.warning(f"Pod {name} not found in namespace {namespace}")
                return None
            raise CatalogFetchError(
                f"Failed to read pod {name}: {e.status} {e.reason}",
                namespace=namespace,
            ) from e
        except HTTPError as e:
            raise CatalogFetchError(f"Failed to read pod {name}: {e}", namespace=namespace) from e

        return record_from_pod(pod)
