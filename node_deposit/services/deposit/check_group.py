"""
Concurrent read-only checks with first-error semantics.

All checks are started together. If one fails, the others are left to
finish (their underlying I/O is not cancelled) but their results are
discarded and the first error is raised.
"""

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any

from loguru import logger


async def gather_checks(checks: Mapping[str, Awaitable[Any]]) -> dict[str, Any]:
    """
    Run named checks concurrently.

    Args:
        checks: Mapping of check name to awaitable

    Returns:
        Mapping of check name to result

    Raises:
        Exception: The first error raised by any check
    """
    if not checks:
        return {}

    tasks = {name: asyncio.ensure_future(check) for name, check in checks.items()}
    done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)

    first_error: tuple[str, BaseException] | None = None
    for name, task in tasks.items():
        if task in done and not task.cancelled() and task.exception() is not None:
            first_error = (name, task.exception())
            break

    if first_error is None:
        return {name: task.result() for name, task in tasks.items()}

    if pending:
        await asyncio.wait(pending)
    # Retrieve late exceptions so they are not reported as unhandled
    for task in tasks.values():
        if task.done() and not task.cancelled():
            task.exception()

    name, error = first_error
    logger.warning(f"Check '{name}' failed: {error}")
    raise error
