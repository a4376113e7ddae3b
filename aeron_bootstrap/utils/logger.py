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

"""Logging configuration for the Aeron bootstrap shim."""

import logging
import sys
from typing import IO, Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = "aeron_bootstrap",
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Setup and configure a logger for the bootstrap shim.

    Init container logs are collected from stdout, so the handler writes
    there unless another stream is given.

    Args:
        name: Logger name
        level: Logging level
        format_string: Custom format string for log messages
        stream: Output stream, stdout when omitted

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logger.addHandler(handler)

    return logger


def configure_logging(
    level: Union[int, str] = logging.INFO,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Re-level the package logger, e.g. from ``--log-level DEBUG``.

    ``stream`` redirects the handler, e.g. to stderr when stdout carries output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    return setup_logger(level=level, stream=stream)


# Default logger instance
logger = setup_logger()
