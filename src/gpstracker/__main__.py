"""Run the tracker against a local gpsd daemon.

Configuration comes from ``GPSTRACKER_*`` environment variables; the
command-line flags override them.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from typing import Any

from gpstracker.config import TrackerConfig
from gpstracker.exceptions import TrackerConfigError
from gpstracker.poller import LocationPoller
from gpstracker.providers.gpsd import GpsdLocationProvider

_logger = logging.getLogger("gpstracker")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="gpstracker", description=__doc__.splitlines()[0])
    parser.add_argument("--endpoint", help="Topic URL to POST fixes to (GPSTRACKER_ENDPOINT_URL)")
    parser.add_argument("--token", help="Static auth token (GPSTRACKER_TOKEN)")
    parser.add_argument("--gpsd-host", help="gpsd host (GPSTRACKER_GPSD_HOST)")
    parser.add_argument("--gpsd-port", type=int, help="gpsd port (GPSTRACKER_GPSD_PORT)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> TrackerConfig:
    overrides: dict[str, Any] = {}
    if args.endpoint:
        overrides["endpoint_url"] = args.endpoint
    if args.token:
        overrides["token"] = args.token
    if args.gpsd_host:
        overrides["gpsd_host"] = args.gpsd_host
    if args.gpsd_port is not None:
        overrides["gpsd_port"] = args.gpsd_port
    config = TrackerConfig.from_env(**overrides)
    config.validate()
    return config


async def _run(config: TrackerConfig) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    provider = GpsdLocationProvider(config.gpsd_host, config.gpsd_port)
    async with LocationPoller(config, provider) as poller:
        poller.start()
        if not poller.is_subscribed:
            _logger.error("Location updates could not be started")
            return
        _logger.info("Tracking started, interval %.0fs", config.interval)
        await stop_event.wait()
        stats = poller.stats()
        _logger.info("Tracking stopped: sent=%d failed=%d", stats.sent, stats.failed)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
    except TrackerConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    asyncio.run(_run(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
