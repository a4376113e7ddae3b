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
Bootstrap properties file generation.

The media driver reads these properties at startup, so the keys, their order
and the trailing newline must stay exactly as produced here:

    aeron.driver.resolver.bootstrap.neighbor=10.0.0.1:8050,10.0.0.2:8050
    aeron.name.resolver.supplier=driver
    aeron.driver.resolver.name=server1.uat.aeron
    aeron.driver.resolver.interface=10.0.0.9:8050
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from aeron_bootstrap.exceptions import ArtifactWriteError
from aeron_bootstrap.utils.logger import logger

NEIGHBOR_KEY = "aeron.driver.resolver.bootstrap.neighbor"
SUPPLIER_KEY = "aeron.name.resolver.supplier"
RESOLVER_NAME_KEY = "aeron.driver.resolver.name"
RESOLVER_INTERFACE_KEY = "aeron.driver.resolver.interface"

NAME_RESOLVER_SUPPLIER = "driver"

DIR_MODE = 0o755
FILE_MODE = 0o644


@dataclass(frozen=True)
class BootstrapArtifact:
    """The resolver settings handed to the media driver.

    Attributes:
        neighbor_addresses: Neighbor addresses, oldest pod first
        port: Resolver discovery port
        resolver_name: Fully qualified name of the local driver
        resolver_interface: Address the local driver advertises
    """

    neighbor_addresses: Tuple[str, ...] = field(default_factory=tuple)
    port: int = 8050
    resolver_name: str = ""
    resolver_interface: str = ""

    @property
    def neighbors(self) -> List[str]:
        """Neighbors as ``address:port``."""
        return [f"{address}:{self.port}" for address in self.neighbor_addresses]

    def lines(self) -> List[str]:
        lines = []
        if self.neighbor_addresses:
            lines.append(f"{NEIGHBOR_KEY}={','.join(self.neighbors)}")
        lines.append(f"{SUPPLIER_KEY}={NAME_RESOLVER_SUPPLIER}")
        lines.append(f"{RESOLVER_NAME_KEY}={self.resolver_name}")
        lines.append(f"{RESOLVER_INTERFACE_KEY}={self.resolver_interface}:{self.port}")
        return lines

    def render(self) -> str:
        return "\n".join(self.lines()) + "\n"


def render_bootstrap_properties(
    neighbor_addresses: Sequence[str],
    port: int,
    resolver_name: str,
    resolver_interface: str,
) -> str:
    """Render the bootstrap properties text.

    The neighbor line is omitted when there are no neighbors.

    Args:
        neighbor_addresses: Neighbor addresses in the order to emit them
        port: Discovery port appended to every address
        resolver_name: Fully qualified resolver name
        resolver_interface: Address of the local resolver interface

    Returns:
        File content ending with a single newline
    """
    return BootstrapArtifact(
        neighbor_addresses=tuple(neighbor_addresses),
        port=port,
        resolver_name=resolver_name,
        resolver_interface=resolver_interface,
    ).render()


def write_bootstrap_properties(path: Union[str, Path], content: str) -> Path:
    """Atomically write ``content`` to ``path``.

    The content goes to a temporary file next to ``path`` and is then renamed
    over it, so the driver never reads a partial file.

    Raises:
        ArtifactWriteError: If the directory or file cannot be written
    """
    target = Path(path)
    directory = target.parent

    try:
        directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise ArtifactWriteError(
            str(target),
            f"Failed to create directory {directory}: {e}",
        ) from e

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=str(directory),
            prefix=f".{target.name}.",
            suffix=".tmp",
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ArtifactWriteError(
            str(target),
            f"Failed to write bootstrap properties file {target}: {e}",
        ) from e

    logger.debug(f"Wrote {len(content)} bytes to {target}")
    return target
