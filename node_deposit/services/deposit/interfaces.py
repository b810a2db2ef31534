"""
Collaborator interfaces.

The deposit pipeline only talks to the outside world through these
protocols. Concrete adapters live in services.blockchain, services.beacon
and services.wallet.
"""

from datetime import timedelta
from typing import Any, Protocol

from node_deposit.models.deposit import (
    DepositCall,
    DepositContractInfo,
    DerivationTemplate,
    GasInfo,
    NetworkConfig,
    SubmissionResult,
    TransactionParams,
    ValidatorKey,
    ValidatorStatus,
)


class AccountLedger(Protocol):
    """Execution-layer account queries."""

    async def balance_of(self, address: str) -> int: ...

    async def sequence_number_of(self, address: str) -> int: ...


class ProtocolState(Protocol):
    """Read-only staking protocol state."""

    async def is_node_registered(self, node: str) -> bool: ...

    async def deposits_enabled(self) -> bool: ...

    async def is_trusted_member(self, node: str) -> bool: ...

    async def stake_count_of(self, node: str) -> int: ...

    async def stake_limit_of(self, node: str) -> int: ...

    async def unbonded_count_of(self, node: str) -> int: ...

    async def unbonded_max_count(self) -> int: ...

    async def deposit_type_of(self, amount_wei: int) -> int: ...

    async def withdrawal_credentials_of(self, minipool_address: str) -> bytes: ...

    async def derivation_template(self) -> DerivationTemplate: ...

    async def deposit_contract_info(self) -> DepositContractInfo: ...

    async def scrub_period(self) -> timedelta: ...


class ConsensusStatus(Protocol):
    """Consensus-layer view of the network."""

    async def network_config(self) -> NetworkConfig: ...

    async def in_consensus(self) -> bool: ...

    async def validator_status(self, public_key: bytes) -> ValidatorStatus: ...

    async def network_identity(self) -> DepositContractInfo: ...


class KeyVault(Protocol):
    """Node account and validator key storage."""

    def account_address(self) -> str: ...

    def next_validator_key(self) -> ValidatorKey: ...

    def create_validator_key(self) -> ValidatorKey: ...

    def persist(self) -> None: ...

    def build_transaction_params(self, amount_wei: int) -> TransactionParams: ...

    def sign_transaction(self, transaction: dict[str, Any]) -> Any: ...


class TransactionSubmitter(Protocol):
    """Deposit contract call encoding, gas estimation and submission."""

    async def estimate_gas(self, params: TransactionParams, call: DepositCall) -> GasInfo: ...

    async def submit_or_serialize(
        self, params: TransactionParams, call: DepositCall
    ) -> SubmissionResult: ...
