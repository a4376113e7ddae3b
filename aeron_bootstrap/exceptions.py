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

"""Custom exceptions for the Aeron bootstrap shim.

Exception Hierarchy:
    BootstrapError (base)
    ├── ConfigurationError - Invalid configuration values
    ├── CatalogFetchError - Kubernetes API failures (retryable unless the client cannot be configured)
    ├── MalformedNetworkStatusError - Unparseable network-status annotation
    ├── NoPeersFoundError - No usable media driver pods (retryable)
    └── ArtifactWriteError - Bootstrap file could not be written

Errors that carry ``retry_after`` are considered transient: the polling
wrapper in :mod:`aeron_bootstrap.retry` re-runs the pipeline for them. All
others abort the run immediately.
"""

from __future__ import annotations

from typing import List, Optional


class BootstrapError(Exception):
    """Base exception for all bootstrap errors."""

    def __init__(self, message: str, retry_after: Optional[float] = None) -> None:
        """Initialize the bootstrap error.

        Args:
            message: Error message
            retry_after: Optional seconds to wait before retrying
        """
        super().__init__(message)
        self.message = message
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        """Whether re-running the pipeline may succeed."""
        return self.retry_after is not None


class ConfigurationError(BootstrapError):
    """Raised when the bootstrap configuration is invalid."""

    def __init__(
        self,
        message: str = "Invalid bootstrap configuration",
        errors: Optional[List[str]] = None,
    ) -> None:
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class CatalogFetchError(BootstrapError):
    """Raised when pods cannot be listed or read from the Kubernetes API."""

    def __init__(
        self,
        message: str = "Failed to fetch pods",
        namespace: Optional[str] = None,
        retry_after: Optional[float] = 1.0,
    ) -> None:
        super().__init__(message, retry_after=retry_after)
        self.namespace = namespace


class MalformedNetworkStatusError(BootstrapError):
    """Raised when a pod's network-status annotation is not valid JSON.

    This aborts the whole run rather than skipping the pod.
    """

    def __init__(
        self,
        message: str = "Malformed network-status annotation",
        pod_name: Optional[str] = None,
    ) -> None:
        if pod_name:
            message = f"{message} on pod {pod_name}"
        super().__init__(message)
        self.pod_name = pod_name


class NoPeersFoundError(BootstrapError):
    """Raised when no media driver pod survives validation and resolution."""

    def __init__(
        self,
        message: str = "No suitable media driver pods found",
        rejected: int = 0,
        label_selector: Optional[str] = None,
        retry_after: float = 2.0,
    ) -> None:
        super().__init__(message, retry_after=retry_after)
        self.rejected = rejected
        self.label_selector = label_selector

    def __str__(self) -> str:
        details = []
        if self.label_selector:
            details.append(f"selector {self.label_selector}")
        if self.rejected:
            details.append(f"{self.rejected} rejected")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class ArtifactWriteError(BootstrapError):
    """Raised when the bootstrap properties file cannot be written."""

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Failed to write bootstrap properties file {path}")
        self.path = path
