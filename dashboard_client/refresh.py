"""Periodic re-fetch loop for the analytics and financial dashboards."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger

from dashboard_client.api import APIError, SessionExpiredError

logger = get_logger(__name__)


async def refresh_periodically(
    fetch: Callable[[], Awaitable[Any]],
    interval: Optional[float],
    on_result: Callable[[Any], None],
    stop_event: asyncio.Event,
) -> int:
    """Call ``fetch`` every ``interval`` seconds until ``stop_event`` is set.

    A failed fetch is logged and retried on the next tick. An expired session
    ends the loop because every later fetch would fail the same way.
    Returns the number of successful refreshes.
    """
    if interval is None:
        interval = get_settings().DASHBOARD_REFRESH_SECONDS

    refreshed = 0
    while not stop_event.is_set():
        try:
            result = await fetch()
        except SessionExpiredError:
            logger.warning("Dashboard refresh stopped: session expired")
            raise
        except APIError as e:
            logger.warning("Dashboard refresh failed: %s", e.message)
        else:
            on_result(result)
            refreshed += 1

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
    return refreshed
