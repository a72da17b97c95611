from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_tool(
    *,
    tool_name: str,
    request: Any,
    fn: Callable[[], T],
) -> T:
    """
    Generic collaborator call wrapper.

    - Logs start with the request
    - Executes the blocking fn() in a worker thread so calls can overlap
    - Logs finish with elapsed time
    - Re-raises exceptions after logging
    """
    logger.debug("tool start name=%s request=%s", tool_name, request)
    started = time.perf_counter()

    try:
        result = await asyncio.to_thread(fn)
    except Exception as e:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.warning("tool failed name=%s elapsed_ms=%.1f error=%s", tool_name, elapsed_ms, e)
        raise

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug("tool finish name=%s elapsed_ms=%.1f", tool_name, elapsed_ms)
    return result
