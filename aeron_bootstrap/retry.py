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
Polling wrapper around the bootstrap pipeline.

When a StatefulSet scales up, the first pods often start before their
siblings have IPs. Rather than failing the init container straight away, the
whole pipeline can be re-run with a fresh pod snapshot, with exponential
backoff and jitter between attempts.

Only errors flagged as retryable (those carrying ``retry_after``) are
retried: no peers yet, or a Kubernetes API failure. A malformed annotation
or an unwritable file fails immediately.

Example:
    >>> handler = RetryHandler(RetryConfig(max_retries=5, initial_delay=2.0))
    >>> result = handler.execute_with_retry(run_bootstrap, config, catalog)
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from aeron_bootstrap.exceptions import BootstrapError
from aeron_bootstrap.utils.logger import logger

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Backoff settings for re-running the pipeline.

    Attributes:
        max_retries: Attempts after the first one, 0 disables retrying
        initial_delay: Delay before the first retry in seconds
        max_delay: Upper bound for a single delay in seconds
        exponential_base: Growth factor between delays
        jitter: Randomize each delay between 50% and 150%
    """

    max_retries: int = 0
    initial_delay: float = 2.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True


class RetryHandler:
    """Re-runs a callable on retryable bootstrap errors."""

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or RetryConfig()
        self._sleep = sleep

    def _calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay for a retry attempt.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay = min(
            self.config.initial_delay * (self.config.exponential_base ** attempt),
            self.config.max_delay,
        )

        if self.config.jitter:
            delay = delay * (0.5 + random.random())

        return delay

    def execute_with_retry(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Execute ``func`` until it succeeds or retries are exhausted.

        Raises:
            BootstrapError: The last error once retries are exhausted, or the
                first non-retryable one
        """
        for attempt in range(self.config.max_retries + 1):
            try:
                result = func(*args, **kwargs)
            except BootstrapError as e:
                if not e.retryable:
                    raise

                if attempt >= self.config.max_retries:
                    if self.config.max_retries:
                        logger.error(
                            f"Max retries ({self.config.max_retries}) exceeded. Last error: {e}"
                        )
                    raise

                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Bootstrap attempt {attempt + 1}/{self.config.max_retries + 1} failed: {e}. "
                    f"Retrying in {delay:.2f}s..."
                )
                self._sleep(delay)
                continue

            if attempt > 0:
                logger.info(f"Bootstrap succeeded after {attempt} retries")
            return result

        # range() always runs at least once and every path returns or raises
        raise AssertionError("unreachable")
