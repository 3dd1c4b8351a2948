"""CLI entry point for the depshare proxy server.

This module provides the command-line interface for starting the server that
intercepts shared dependency requests and redirects them to a single
compatible copy.
"""

from __future__ import annotations

import ipaddress
import logging
import os
import sys
from typing import Any, Dict, Optional

import yaml

from depshare.args import parse_args
from depshare.common.logging_utils import configure_logging
from depshare.constants import ExitCodes
from depshare.proxy.server import ProxyConfig, run_proxy_server_sync

logger = logging.getLogger(__name__)

_LOCAL_HOSTNAMES = frozenset(("localhost", "localhost.localdomain"))


def _is_local_bind_host(host: str) -> bool:
    """Return True if host only accepts connections from this machine."""
    name = (host or "").strip().lower()
    if not name:
        return False
    if name in _LOCAL_HOSTNAMES:
        return True
    try:
        return ipaddress.ip_address(name).is_loopback
    except ValueError:
        return False


def _enforce_local_binding(host: str, allow_external: bool) -> None:
    """Exit with a usage error when binding off-host without --allow-external."""
    if _is_local_bind_host(host):
        return
    if allow_external:
        logger.warning("Serving dependency redirects on non-local address %s", host)
        return
    sys.stderr.write(
        f"ERROR: refusing to bind to {host}; pass --allow-external to serve other hosts.\n"
    )
    sys.exit(ExitCodes.USAGE_ERROR.value)


def _load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load server configuration from file.

    Args:
        config_path: Path to YAML/JSON config file.

    Returns:
        The ``proxy`` section of the file, or the whole mapping.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", config_path, e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if not isinstance(data, dict):
        return {}
    section = data.get("proxy", data)
    return section if isinstance(section, dict) else {}


def _setup_logging(args: Any) -> None:
    """Apply --loglevel (or DEPSHARE_LOG_LEVEL) and attach the optional --logfile."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logging.getLogger().addHandler(handler)
    logger.info("Logging to file: %s", log_file)


def run_proxy_server(args: Any) -> None:
    """Entry point for the proxy server command.

    Args:
        args: Parsed CLI arguments namespace.
    """
    _setup_logging(args)

    config_path = getattr(args, "CONFIG", None)
    file_config = _load_config(config_path)
    if file_config:
        logger.info("Loaded config from: %s", config_path)

    try:
        config = ProxyConfig.from_args(args, file_config)
    except (TypeError, ValueError) as e:
        sys.stderr.write(f"ERROR: Invalid configuration: {e}\n")
        sys.exit(ExitCodes.USAGE_ERROR.value)
    _enforce_local_binding(config.host, config.allow_external)

    upstream = config.upstream or "none, non-dependency requests get 404"
    print(f"depshare: redirecting {config.prefix}<key> requests on http://{config.host}:{config.port}")
    print(f"depshare: upstream {upstream} (Ctrl+C to stop)")

    run_proxy_server_sync(config)


def main(argv=None) -> None:
    """Console script entry point."""
    run_proxy_server(parse_args(argv))


if __name__ == "__main__":
    main()
