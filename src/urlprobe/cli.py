#!/usr/bin/env python3
# cli.py: command line entry point for urlprobe

import argparse
import asyncio
import logging
import sys

from urlprobe.config import load_config
from urlprobe.core import ProbeRunner
from urlprobe.errors import ConfigError
from urlprobe.logging_config import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Probe HTTP endpoints a fixed number of times at a fixed interval",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Config file (defaults to $URLPROBE_CONFIG, then urls.yaml/urls.yml in the working directory)",
    )

    # Logging & Debugging
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., urlprobe.log)",
    )

    return parser.parse_args(argv)


async def run(argv=None) -> int:
    args = parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    setup_logging(level=log_level, log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logging.critical(f"fatal error config file: {e}")
        return 1

    logging.info(f"CONFIG {config}")

    await ProbeRunner(config).run()
    return 0


def main():
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
