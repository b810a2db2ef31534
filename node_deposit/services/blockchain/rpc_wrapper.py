"""
RPC Wrapper with Timeout.

Provides a single deadline for blockchain and beacon calls. There is no
retry here: a failed read must abort the deposit, and the caller decides
whether to try again.
"""

import asyncio
from typing import Any

from loguru import logger

from node_deposit.config.constants import BLOCKCHAIN_TIMEOUT


class BlockchainTimeoutError(Exception):
    """Raised when blockchain RPC call times out."""
    pass


async def with_timeout(
    coro: Any,
    timeout: float = BLOCKCHAIN_TIMEOUT,
    operation_name: str = "RPC call",
) -> Any:
    """
    Execute async coroutine with timeout.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds (default: BLOCKCHAIN_TIMEOUT)
        operation_name: Operation name for logging

    Returns:
        Result of the coroutine

    Raises:
        BlockchainTimeoutError: If operation times out
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except TimeoutError as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.error(error_msg)
        raise BlockchainTimeoutError(error_msg) from e
