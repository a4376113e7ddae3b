#!/usr/bin/env python3
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
Aeron Kubernetes bootstrap CLI.

Runs as an init container next to the media driver: finds the sibling media
driver pods and writes the resolver bootstrap properties file.

Usage:
    aeron-k8s-bootstrap [OPTIONS]          # Discover neighbors and write the file
    aeron-k8s-bootstrap --dry-run          # Print the file instead of writing it
    aeron-k8s-bootstrap version            # Show version information

    Or with Python:
    python -m aeron_bootstrap

Every option defaults to its AERON_MD_* environment variable.

Exit codes:
    0  Bootstrap file written
    1  Bootstrap failed (no peers, API error, malformed annotation, write error)
    2  Invalid configuration
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from typing import Any, Dict, List, Optional

from aeron_bootstrap.bootstrap import run_bootstrap
from aeron_bootstrap.cluster.catalog import KubernetesCatalog
from aeron_bootstrap.config import BootstrapConfig
from aeron_bootstrap.exceptions import BootstrapError, ConfigurationError
from aeron_bootstrap.retry import RetryConfig, RetryHandler
from aeron_bootstrap.utils.logger import configure_logging, logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

# CLI option dest -> BootstrapConfig field
_CONFIG_OPTIONS = {
    "namespace": "namespace",
    "hostname": "hostname",
    "label_selector": "label_selector",
    "max_peers": "max_peers",
    "port": "discovery_port",
    "hostname_suffix": "hostname_suffix",
    "bootstrap_path": "bootstrap_path",
    "interface_name": "interface_name",
    "network_name": "network_name",
    "retries": "retries",
    "retry_delay": "retry_delay",
}


def get_version() -> str:
    """Get the package version."""
    import aeron_bootstrap
    return getattr(aeron_bootstrap, "__version__", "unknown")


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    version = get_version()

    if args.json:
        import json
        import platform
        info = {
            "aeron-k8s-bootstrap": version,
            "python": platform.python_version(),
            "platform": platform.system(),
        }
        print(json.dumps(info, indent=2))
    else:
        print(f"aeron-k8s-bootstrap {version}")

    return EXIT_OK


def build_config(args: argparse.Namespace) -> BootstrapConfig:
    """Build the configuration from the environment plus CLI overrides."""
    config = BootstrapConfig.from_env()

    overrides: Dict[str, Any] = {}
    for option, field_name in _CONFIG_OPTIONS.items():
        value = getattr(args, option, None)
        if value is not None:
            overrides[field_name] = value

    return dataclasses.replace(config, **overrides) if overrides else config


def cmd_bootstrap(args: argparse.Namespace) -> int:
    """Discover neighbors and write the bootstrap properties file."""
    logger.info("Starting Aeron bootstrap neighbor discovery...")

    config = build_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Invalid configuration: {error}")
        return EXIT_CONFIG_ERROR

    handler = RetryHandler(RetryConfig(
        max_retries=config.retries,
        initial_delay=config.retry_delay,
    ))
    catalog = KubernetesCatalog()

    try:
        result = handler.execute_with_retry(
            run_bootstrap,
            config,
            catalog,
            write=not args.dry_run,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR
    except BootstrapError as e:
        logger.error(f"Error: {e}. Exiting without creating bootstrap file.")
        return EXIT_FAILURE

    if args.dry_run:
        sys.stdout.write(result.content)

    logger.info("Bootstrap neighbor discovery completed successfully")
    return EXIT_OK


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="aeron-k8s-bootstrap",
        description="Generate Aeron resolver bootstrap neighbors from Kubernetes pods",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  aeron-k8s-bootstrap                                  # Defaults from AERON_MD_* env vars
  aeron-k8s-bootstrap --max-peers 3 --port 8050        # Three oldest pods as neighbors
  aeron-k8s-bootstrap --network-name aeron-network     # Advertise the Multus network
  aeron-k8s-bootstrap --retries 10 --dry-run           # Wait for peers, print result
""",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default="INFO",
        help="Set logging level (default: INFO)",
    )
    parser.add_argument(
        "--namespace",
        help="Namespace to search (env: AERON_MD_NAMESPACE, default: service account namespace)",
    )
    parser.add_argument(
        "--hostname",
        help="Local pod name (env: HOSTNAME)",
    )
    parser.add_argument(
        "--label-selector",
        help="Media driver pod label selector (env: AERON_MD_LABEL_SELECTOR)",
    )
    parser.add_argument(
        "--max-peers",
        type=int,
        help="Maximum bootstrap neighbors, 0 for unlimited (env: AERON_MD_MAX_BOOTSTRAP_PODS)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Resolver discovery port (env: AERON_MD_DISCOVERY_PORT, default: 8050)",
    )
    parser.add_argument(
        "--hostname-suffix",
        help="Resolver name suffix (env: AERON_MD_HOSTNAME_SUFFIX, default: .aeron)",
    )
    parser.add_argument(
        "--bootstrap-path",
        help="Output file (env: AERON_MD_BOOTSTRAP_PATH, default: /etc/aeron/bootstrap.properties)",
    )
    parser.add_argument(
        "--interface-name",
        help="Secondary interface to advertise (env: AERON_MD_SECONDARY_INTERFACE_NAME)",
    )
    parser.add_argument(
        "--network-name",
        help="Secondary network to advertise (env: AERON_MD_SECONDARY_INTERFACE_NETWORK_NAME)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        help="Re-run discovery this many times while no peers are found (env: AERON_MD_BOOTSTRAP_RETRIES)",
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        help="Initial delay between attempts in seconds (env: AERON_MD_BOOTSTRAP_RETRY_DELAY)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the bootstrap file to stdout instead of writing it",
    )
    parser.set_defaults(func=cmd_bootstrap)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
    )
    version_parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output in JSON format",
    )
    version_parser.set_defaults(func=cmd_version)

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """Parse ``argv`` and run the selected command, returning the exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Keep stdout for the properties file on a dry run
    stream = sys.stderr if getattr(args, "dry_run", False) else None
    configure_logging(level=args.log_level, stream=stream)

    return args.func(args)


def main() -> None:
    """Main entry point for the CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
