#!/usr/bin/env python3
"""
ACM Config Watcher - Main Entry Point

Loads the watcher configuration and prints every config change.

Usage:
    acm-watch                    # Use default config.yaml
    acm-watch --config my.yaml   # Use custom config file
    acm-watch --dry-run          # Print config and exit
    acm-watch --once             # Exit after the first change

The watcher will:
1. Resolve the config server through the address server
2. Long-poll for changes to the configured data ids
3. Write each changed config to stdout
4. On errors, refresh the server address and keep polling
"""

import argparse
import asyncio
import sys
from typing import TextIO

from .common.config import WatchConfig, load_watch_config
from .common.exceptions import ConfigError, WATCH_ERRORS
from .common.logging_setup import get_service_logger, set_log_level
from .services.watch import AcmWatcher

logger = get_service_logger("cli")

# Pause before refreshing the server address after a failed poll
ERROR_BACKOFF_S = 1.0


def print_config_summary(config: WatchConfig, out: TextIO | None = None):
    """Print a summary of the configuration (stderr unless told otherwise)."""
    out = out or sys.stderr
    print("\n" + "=" * 60, file=out)
    print("  ACM CONFIG WATCHER", file=out)
    print("=" * 60, file=out)

    print(f"\n  Address server: {config.address_server}", file=out)
    print(f"  Namespace: {config.identity.namespace}", file=out)
    print(f"  Group: {config.identity.group}", file=out)
    print(f"  Access key: {config.identity.access_key}", file=out)

    print(f"\n  Data ids ({len(config.data_ids)}):", file=out)
    for data_id in config.data_ids:
        print(f"    - {data_id}", file=out)

    settings = config.settings
    print(f"\n  Settings:", file=out)
    print(f"    - Server port: {settings.server_port}", file=out)
    print(f"    - Long-poll timeout: {settings.poll_timeout_s}s", file=out)
    print(f"    - Fetch timeout: {settings.fetch_timeout_s}s", file=out)

    print("=" * 60 + "\n", file=out)


def emit_config(data_id: str, content: bytes) -> None:
    """Write a changed config to stdout"""
    print(f"----- {data_id} -----")
    sys.stdout.flush()
    sys.stdout.buffer.write(content)
    if not content.endswith(b"\n"):
        sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()


async def watch_loop(watcher: AcmWatcher, once: bool = False) -> None:
    """
    Caller-side retry loop around wait_for_new_config().

    Args:
        watcher: Ready watcher instance
        once: Return after the first change

    Raises:
        TransportError: a non-recoverable error (e.g. malformed server URL)
    """
    while True:
        try:
            data_id, content = await watcher.wait_for_new_config()
        except WATCH_ERRORS as e:
            if not e.recoverable:
                raise
            logger.warning(f"Watch failed: {e}", extra={"server": str(watcher.server_address)})
            await asyncio.sleep(ERROR_BACKOFF_S)
            try:
                await watcher.refresh_acm_server()
            except WATCH_ERRORS as refresh_error:
                logger.error(f"Server refresh failed: {refresh_error}")
            continue

        emit_config(data_id, content)
        if once:
            return


async def main_async(config: WatchConfig, once: bool = False):
    """
    Async main function.

    Args:
        config: Loaded watcher configuration
        once: Exit after the first change
    """
    watcher = await AcmWatcher.create(
        config.address_server,
        config.identity,
        config.data_ids,
        settings=config.settings,
    )
    async with watcher:
        try:
            await watch_loop(watcher, once=once)
        except asyncio.CancelledError:
            logger.info("Watcher cancelled")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Watch ACM configuration entries for changes"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print configuration and exit without watching"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Exit after the first config change"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (debug) logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")

    try:
        config = load_watch_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    print_config_summary(config, out=sys.stdout if args.dry_run else sys.stderr)

    if args.dry_run:
        print("Dry run mode - exiting without watching")
        return 0

    logger.info("Starting watcher...")

    try:
        asyncio.run(main_async(config, once=args.once))
    except KeyboardInterrupt:
        print("\nStopped by user", file=sys.stderr)
    except WATCH_ERRORS as e:
        # Initial resolve failures and non-recoverable errors end up here
        logger.error(f"Watcher stopped: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
