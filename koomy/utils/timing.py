"""Latency measurement for API round-trips."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Generator

logger = structlog.get_logger(__name__)


@contextmanager
def timed(
    label: str, *, slow_seconds: float | None = None, **context: object
) -> Generator[dict[str, float], None, None]:
    """Measure the wrapped block and log it under ``label``.

    Logs at debug level, or as a ``slow_call`` warning once the block takes
    ``slow_seconds`` or longer. The elapsed time is also recorded when the
    block raises.

        with timed("api_request", method="GET", endpoint="/communities") as t:
            response = await client.get(url)
        t["elapsed"]  # seconds
    """
    result: dict[str, float] = {"elapsed": 0.0}
    start = time.monotonic()
    try:
        yield result
    finally:
        result["elapsed"] = time.monotonic() - start
        if slow_seconds is not None and result["elapsed"] >= slow_seconds:
            logger.warning(
                "slow_call", label=label, elapsed_seconds=result["elapsed"], **context
            )
        else:
            logger.debug("timed", label=label, elapsed_seconds=result["elapsed"], **context)
