#!/usr/bin/env python3
"""
Calculon Server Entry Point

This is the main entry point for starting the Calculon server.

Usage:
    python -m calculon.server                    # Default settings (127.0.0.1:4673)
    python -m calculon.server --port 8080        # Custom port
    python -m calculon.server --host 0.0.0.0     # Custom host
    python -m calculon.server --debug            # Enable debug logging

Environment Variables:
    CALCULON_HOST       - Server bind address
    CALCULON_PORT       - Server port
    CALCULON_DEBUG      - Enable debug mode (true/false)
    CALCULON_LOG_LEVEL  - Log level when not in debug mode
    PORT                - Overrides the port (container deployments)
"""

import argparse
import asyncio
import logging
import os
import signal
import sys

from .config.settings import settings
from .network.tcp_server import CalculonServer
from .state.cell import StateCell


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Calculon: shared accumulator TCP server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    env_port = os.getenv('PORT')
    if env_port:
        args.port = int(env_port)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    # One cell for the whole process, shared by every session
    cell = StateCell()
    server = CalculonServer(host=args.host, port=args.port, cell=cell)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        await server.stop()

    # Register signal handlers (Unix only)
    shutdown_tasks = []
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: shutdown_tasks.append(asyncio.create_task(shutdown(s)))
            )

    logger.info("Starting Calculon server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Debug: {args.debug}")

    exit_code = 0
    try:
        loop.run_until_complete(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    except OSError as e:
        logger.error(f"Could not bind {args.host}:{args.port}: {e}")
        exit_code = 1
    finally:
        # start() can return before the signal handler finishes stop()
        if shutdown_tasks:
            loop.run_until_complete(asyncio.gather(*shutdown_tasks))
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        logger.info(f"Server shutdown complete (X = {cell.value})")

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
