"""Worker process for the scheduled balance integrity sweep.

Runs an asyncio loop that waits for an initial delay, then sweeps all
employee balances once per configured interval.
"""

from __future__ import annotations

import asyncio
import logging

from nexus_leave.config import get_settings
from nexus_leave.db import get_session_factory

logger = logging.getLogger(__name__)


async def run_sweep_once() -> None:
    """Run a single integrity sweep in its own session. Failures are logged, never raised."""
    from nexus_leave.services.integrity import run_integrity_sweep

    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            result = await run_integrity_sweep(session)
        logger.info(
            "Integrity sweep complete: negative=%d over_cap=%d repaired=%d errors=%d",
            len(result.negative),
            len(result.over_cap),
            result.repaired,
            result.errors,
        )
    except Exception:
        logger.exception("Integrity sweep failed")


async def run_integrity_loop(initial_delay: float, interval: float | None) -> None:
    """Sweep after ``initial_delay`` seconds, then every ``interval`` seconds.

    With ``interval=None`` the sweep runs once and the loop returns.
    """
    logger.info("Integrity sweep scheduled in %.1fs", initial_delay)
    await asyncio.sleep(initial_delay)
    while True:
        await run_sweep_once()
        if interval is None:
            return
        await asyncio.sleep(interval)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main() -> None:
    """Entry point for the worker process."""
    settings = get_settings()
    setup_logging(settings.log_level)
    asyncio.run(
        run_integrity_loop(settings.integrity_sweep_delay_seconds, settings.integrity_sweep_interval_seconds)
    )


if __name__ == "__main__":
    main()
