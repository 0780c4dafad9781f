"""
Run the Feedback Hub API.

This module provides a command-line interface for starting the API server.
"""

import argparse
import logging
import sys

from feedbackhub.api_gateway.gateway import run_gateway
from feedbackhub.config import print_settings, settings


def setup_logging(log_level: str = "INFO", log_file: str = None):
    """
    Reconfigure logging from command-line options.

    Args:
        log_level: Log level
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        print(f"Invalid log level: {log_level}")
        numeric_level = logging.INFO

    log_config = {
        'level': numeric_level,
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'datefmt': '%Y-%m-%d %H:%M:%S',
        'force': True,
    }

    if log_file:
        log_config['filename'] = log_file
        log_config['filemode'] = 'a'

    logging.basicConfig(**log_config)

    # Keep library and access logs quiet
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Run the Feedback Hub API")

    parser.add_argument(
        "--host",
        type=str,
        default=settings.api_host,
        help=f"Host to bind to (default: {settings.api_host})"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.api_port,
        help=f"Port to bind to (default: {settings.api_port})"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Log level (default: {settings.log_level.upper()})"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Log file path (default: None, logs to console)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (default: DEBUG setting)"
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print the effective settings and exit"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.show_config:
        print(print_settings())
        return

    setup_logging(args.log_level, args.log_file)

    logging.info(f"Starting Feedback Hub API on {args.host}:{args.port}")

    try:
        run_gateway(host=args.host, port=args.port, reload=args.reload or None)
    except Exception as e:
        logging.error(f"Error running Feedback Hub API: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
