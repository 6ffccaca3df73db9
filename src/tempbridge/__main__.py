"""Command-line entry point for a single scheduled bridge run.

Usage
-----
Set the ``EWL_*`` and ``TANDEM_*`` environment variables and run::

    python -m tempbridge --threshold 0.2 --state-file /var/lib/tempbridge/last_temp.txt

The exit status tells the scheduler what happened: ``0`` for a delivery,
a skip or a dry run, non-zero for any failure (see ``EXIT_*``).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from tempbridge.bridge import run_from_config
from tempbridge.config import BridgeConfig
from tempbridge.exceptions import (
    BridgeConfigError,
    DeliveryError,
    ExtractionError,
    SourceError,
)
from tempbridge.models.delivery import DeliveryResult

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_SOURCE = 3
EXIT_EXTRACTION = 4
EXIT_DELIVERY = 5
EXIT_TIMEOUT = 6

_logger = logging.getLogger("tempbridge")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tempbridge",
        description="Forward an eWeLink temperature reading to Tandem when it changed enough.",
    )
    parser.add_argument("--device-id", help="eWeLink device id (default: $EWL_DEVICE_ID)")
    parser.add_argument(
        "--threshold",
        type=float,
        help="Minimum absolute change that triggers a delivery (default: $TEMP_THRESHOLD or 0.2)",
    )
    parser.add_argument("--state-file", help="File holding the last reported value (default: $STATE_FILE)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Decide and log, but do not deliver or update the state file.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=0,
        help="Abort the whole run after N seconds (0 = no limit).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def _run(config: BridgeConfig, timeout: float) -> DeliveryResult:
    if timeout > 0:
        return await asyncio.wait_for(run_from_config(config), timeout)
    return await run_from_config(config)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = BridgeConfig.from_env(
            device_id=args.device_id,
            threshold=args.threshold,
            state_file=args.state_file,
            dry_run=args.dry_run,
        )
    except BridgeConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        result = asyncio.run(_run(config, args.timeout))
    except SourceError as exc:
        _logger.error("Could not read sensor: %s", exc)
        return EXIT_SOURCE
    except ExtractionError as exc:
        _logger.error("No valid numeric temperature found: %s", exc)
        return EXIT_EXTRACTION
    except DeliveryError as exc:
        _logger.error("Delivery failed (status=%s): %s", exc.status_code, exc.detail or exc)
        return EXIT_DELIVERY
    except BridgeConfigError as exc:
        _logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG
    except TimeoutError:
        _logger.error("Run exceeded %.1f s timeout", args.timeout)
        return EXIT_TIMEOUT

    _logger.info("Run finished: %s (%s)", result.outcome.value, result.decision.reason)
    if result.persistence_error is not None:
        _logger.warning("Last reported value was not stored: %s", result.persistence_error)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
