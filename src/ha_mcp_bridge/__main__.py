#!/usr/bin/env python3
"""
Command-line entry point for the Home Assistant MCP Bridge
Reads JSON-RPC requests on stdin and writes responses on stdout
"""

import sys
import logging
import argparse
from typing import List, Optional

from . import SERVER_NAME, __version__
from .config import BridgeConfig, ConfigError, load_env_files
from .logging_config import configure_logging
from .server import McpServer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="Expose Home Assistant lights and switches over line-delimited JSON-RPC (MCP stdio)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Configuration from .env / .env.local (HA_URL, HA_TOKEN)
  %(prog)s

  # Explicit configuration
  %(prog)s --url http://homeassistant.local:8123 --token <long-lived-token>

  # Verify the connection and exit
  %(prog)s --check
        """
    )
    parser.add_argument("--url", help="Home Assistant base URL (default: $HA_URL)")
    parser.add_argument("--token", help="Long-lived access token (default: $HA_TOKEN)")
    parser.add_argument("--log-file", help="Append-only log file (default: $MCP_LOG_FILE or ha_mcp_bridge.log)")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
    parser.add_argument("--no-verify-ssl", dest="verify_ssl", action="store_false", default=None,
                        help="Skip TLS certificate verification")
    parser.add_argument("--registry-websocket", action="store_true", default=None,
                        help="Fall back to the WebSocket API when a registry REST read fails")
    parser.add_argument("--check", action="store_true", help="Test the Home Assistant connection and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    load_env_files()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = BridgeConfig.from_env(
            url=args.url,
            token=args.token,
            log_file=args.log_file,
            debug=args.debug,
            verify_ssl=args.verify_ssl,
            registry_websocket=args.registry_websocket,
        )
    except ConfigError as e:
        parser.error(str(e))

    configure_logging(config.log_file, config.debug)
    logger.info(f"Configuration: {config.redacted()}")

    server = McpServer(config)

    if args.check:
        result = server.service.test_connection()
        if result.get('status') == 'success':
            logger.info(f"✓ Connected to Home Assistant ({result.get('connection_type')}): {result.get('message')}")
            return 0
        logger.error(f"Home Assistant connection test failed: {result.get('error')}")
        return 1

    try:
        server.serve(sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
