"""Entry point for the ROSA MCP server."""

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError

from rosa_mcp import __version__
from rosa_mcp.config import LogLevel, RosaMCPConfig, TransportMode


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the server.

    Logs go to stderr; stdout carries the MCP protocol on stdio.
    """
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rosa-mcp",
        description="MCP server for ROSA HCP (Red Hat OpenShift Service on AWS)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a TOML configuration file",
    )

    # Transport options
    parser.add_argument(
        "--transport",
        choices=[mode.value for mode in TransportMode],
        default=None,
        help="Transport mode (default: from config or stdio)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind HTTP transports to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind HTTP transports to (default: 8080)",
    )
    parser.add_argument(
        "--sse-base-url",
        default=None,
        help="Public base URL the SSE endpoints are served under",
    )

    # OCM options
    parser.add_argument(
        "--ocm-base-url",
        default=None,
        help="OCM API base URL (default: https://api.openshift.com)",
    )
    parser.add_argument(
        "--ocm-client-id",
        default=None,
        help="OAuth client ID for the offline token exchange (default: cloud-services)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RosaMCPConfig:
    """Build the configuration; CLI flags take precedence over the TOML file and the environment."""
    config_kwargs: dict[str, Any] = {}

    if args.transport:
        config_kwargs["transport"] = TransportMode(args.transport)

    if args.host:
        config_kwargs["host"] = args.host

    if args.port:
        config_kwargs["port"] = args.port

    if args.sse_base_url:
        config_kwargs["sse_base_url"] = args.sse_base_url

    if args.ocm_base_url:
        config_kwargs["ocm_base_url"] = args.ocm_base_url

    if args.ocm_client_id:
        config_kwargs["ocm_client_id"] = args.ocm_client_id

    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    if args.config:
        return RosaMCPConfig.from_toml(args.config, **config_kwargs)
    return RosaMCPConfig(**config_kwargs)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except (OSError, ValueError, ValidationError) as e:
        setup_logging(LogLevel.ERROR)
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting ROSA MCP server v{__version__}")

    try:
        warnings = config.validate_config()
        for warning in warnings:
            logger.warning(warning)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    from rosa_mcp.server import create_server

    server = create_server(config)
    server.run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
