"""
Transaction Submitter for node deposits.

Encodes the node deposit call, estimates gas, signs through the key vault
and either broadcasts the transaction or returns it serialized.
"""

from typing import Any

from loguru import logger
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from node_deposit.config.constants import (
    BLOCKCHAIN_TIMEOUT,
    GAS_LIMIT_BUFFER,
    MAX_FEE_GWEI,
    MAX_PRIORITY_FEE_GWEI,
)
from node_deposit.models.deposit import DepositCall, GasInfo, SubmissionResult, TransactionParams
from node_deposit.services.deposit.interfaces import KeyVault
from node_deposit.utils.security import mask_address, to_hex

from .contract_abis import ROCKET_NODE_DEPOSIT_ABI
from .protocol_state import Web3ProtocolState
from .rpc_wrapper import with_timeout


class Web3TransactionSubmitter:
    """
    Submits node deposit transactions.

    Features:
    - Gas estimation with a safety buffer
    - EIP-1559 fees capped by configuration
    - Dry-run serialization without broadcast
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        protocol: Web3ProtocolState,
        vault: KeyVault,
        gas_limit_buffer: float = GAS_LIMIT_BUFFER,
        max_fee_gwei: int = MAX_FEE_GWEI,
        max_priority_fee_gwei: int = MAX_PRIORITY_FEE_GWEI,
        timeout: float = BLOCKCHAIN_TIMEOUT,
    ) -> None:
        """
        Initialize transaction submitter.

        Args:
            web3: AsyncWeb3 instance
            protocol: Protocol state (resolves the node deposit contract)
            vault: Key vault used for signing
            gas_limit_buffer: Multiplier applied to the gas estimate
            max_fee_gwei: Max fee per gas cap
            max_priority_fee_gwei: Priority fee cap
            timeout: Per-call timeout in seconds
        """
        self.web3 = web3
        self.protocol = protocol
        self.vault = vault
        self.gas_limit_buffer = gas_limit_buffer
        self.max_fee_wei = web3.to_wei(max_fee_gwei, "gwei")
        self.max_priority_fee_wei = web3.to_wei(max_priority_fee_gwei, "gwei")
        self.timeout = timeout

    async def _deposit_contract(self) -> AsyncContract:
        address = await self.protocol.node_deposit_address()
        return self.web3.eth.contract(address=address, abi=ROCKET_NODE_DEPOSIT_ABI)

    async def _deposit_function(self, call: DepositCall) -> Any:
        contract = await self._deposit_contract()
        return contract.functions.deposit(
            self.web3.to_wei(call.min_node_fee, "ether"),
            call.validator_pubkey,
            call.validator_signature,
            call.deposit_data_root,
            call.salt,
            self.web3.to_checksum_address(call.expected_minipool_address),
        )

    async def estimate_gas(self, params: TransactionParams, call: DepositCall) -> GasInfo:
        """
        Estimate gas for the deposit call.

        Raises:
            ContractLogicError: If the deposit would revert
            BlockchainTimeoutError: If a call times out
        """
        function = await self._deposit_function(call)
        estimated = await with_timeout(
            function.estimate_gas({"from": params.from_address, "value": params.value}),
            timeout=self.timeout,
            operation_name="estimate_gas(deposit)",
        )
        gas_price = await with_timeout(self.web3.eth.gas_price, timeout=self.timeout, operation_name="gas_price")

        gas_info = GasInfo(
            estimated_gas=int(estimated),
            safe_gas_limit=int(estimated * self.gas_limit_buffer),
            gas_price_wei=int(gas_price),
        )
        logger.debug(
            f"Deposit gas estimate: {gas_info.estimated_gas} "
            f"(limit {gas_info.safe_gas_limit}, "
            f"{self.web3.from_wei(gas_info.gas_price_wei, 'gwei')} Gwei)"
        )
        return gas_info

    async def _fees(self) -> tuple[int, int]:
        priority = await with_timeout(
            self.web3.eth.max_priority_fee, timeout=self.timeout, operation_name="max_priority_fee"
        )
        block = await with_timeout(
            self.web3.eth.get_block("latest"), timeout=self.timeout, operation_name="get_block(latest)"
        )
        priority = min(int(priority), self.max_priority_fee_wei)
        max_fee = min(2 * int(block["baseFeePerGas"]) + priority, self.max_fee_wei)
        if max_fee < priority:
            max_fee = priority
        return max_fee, priority

    async def submit_or_serialize(self, params: TransactionParams, call: DepositCall) -> SubmissionResult:
        """
        Sign the deposit transaction and broadcast it unless params.no_send.

        Returns:
            SubmissionResult with the tx hash and raw signed bytes

        Raises:
            Web3Exception: If the provider rejects the transaction
            BlockchainTimeoutError: If a call times out
        """
        function = await self._deposit_function(call)

        nonce = params.nonce
        if nonce is None:
            nonce = await with_timeout(
                self.web3.eth.get_transaction_count(params.from_address, "pending"),
                timeout=self.timeout,
                operation_name="get_transaction_count(pending)",
            )

        gas_info = await self.estimate_gas(params, call)
        max_fee, priority_fee = await self._fees()
        chain_id = await with_timeout(self.web3.eth.chain_id, timeout=self.timeout, operation_name="chain_id")

        transaction = await with_timeout(
            function.build_transaction({
                "from": params.from_address,
                "value": params.value,
                "nonce": nonce,
                "gas": gas_info.safe_gas_limit,
                "maxFeePerGas": max_fee,
                "maxPriorityFeePerGas": priority_fee,
                "chainId": chain_id,
            }),
            timeout=self.timeout,
            operation_name="build_transaction(deposit)",
        )

        signed = self.vault.sign_transaction(transaction)
        raw = bytes(signed.raw_transaction)
        tx_hash = to_hex(signed.hash)

        if params.no_send:
            logger.info(f"Deposit transaction {tx_hash} signed, not sent (nonce {nonce})")
            return SubmissionResult(tx_hash=tx_hash, raw_transaction=raw, broadcast=False)

        sent_hash = await with_timeout(
            self.web3.eth.send_raw_transaction(raw),
            timeout=self.timeout,
            operation_name="send_raw_transaction",
        )
        tx_hash = to_hex(sent_hash)

        logger.info(
            f"Transaction sent! Hash: {tx_hash}\n"
            f"  From: {mask_address(params.from_address)}\n"
            f"  Nonce: {nonce}\n"
            f"  Gas: {gas_info.safe_gas_limit}\n"
            f"  Max fee: {self.web3.from_wei(max_fee, 'gwei')} Gwei"
        )
        return SubmissionResult(tx_hash=tx_hash, raw_transaction=raw, broadcast=True)
