"""
Account ledger.

Balance and transaction count queries against the execution client.
"""

from loguru import logger
from web3 import AsyncWeb3

from node_deposit.config.constants import BLOCKCHAIN_TIMEOUT
from node_deposit.utils.security import mask_address

from .rpc_wrapper import with_timeout


class Web3AccountLedger:
    """
    Reads account state from an execution client.

    Errors are not swallowed: a failed read must abort the deposit.
    """

    def __init__(self, web3: AsyncWeb3, timeout: float = BLOCKCHAIN_TIMEOUT) -> None:
        """
        Initialize account ledger.

        Args:
            web3: AsyncWeb3 instance
            timeout: Per-call timeout in seconds
        """
        self.web3 = web3
        self.timeout = timeout

    async def balance_of(self, address: str) -> int:
        """
        Get ETH balance in wei.

        Raises:
            BlockchainTimeoutError: If the call times out
            Web3Exception: If the provider call fails
        """
        balance = await with_timeout(
            self.web3.eth.get_balance(self.web3.to_checksum_address(address)),
            timeout=self.timeout,
            operation_name=f"get_balance({mask_address(address)})",
        )
        logger.debug(f"Balance of {mask_address(address)}: {balance} wei")
        return int(balance)

    async def sequence_number_of(self, address: str) -> int:
        """
        Get the latest (confirmed) transaction count of an account.

        Raises:
            BlockchainTimeoutError: If the call times out
            Web3Exception: If the provider call fails
        """
        nonce = await with_timeout(
            self.web3.eth.get_transaction_count(self.web3.to_checksum_address(address), "latest"),
            timeout=self.timeout,
            operation_name=f"get_transaction_count({mask_address(address)})",
        )
        return int(nonce)
