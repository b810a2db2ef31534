"""
Pre-flight deposit checks.

Answers "can this node deposit right now" without changing any state.
Independent queries run concurrently; any query error aborts the whole
check instead of defaulting to a passing value.
"""

import asyncio

from loguru import logger

from node_deposit.config.constants import VALIDATOR_DEPOSIT_AMOUNT_GWEI
from node_deposit.models.deposit import DepositRequest, DerivedTarget, GasInfo, NetworkConfig, ResolvedSalt
from node_deposit.models.preflight import PreflightResult
from node_deposit.services.deposit.check_group import gather_checks
from node_deposit.services.deposit.credentials import WithdrawalCredentialResolver
from node_deposit.services.deposit.deposit_data import build_deposit_call, build_deposit_data
from node_deposit.services.deposit.interfaces import (
    AccountLedger,
    ConsensusStatus,
    KeyVault,
    ProtocolState,
    TransactionSubmitter,
)
from node_deposit.services.deposit.salt import resolve_salt
from node_deposit.services.deposit.verifier import verify_deposit_data
from node_deposit.utils.exceptions import NodeNotRegisteredError
from node_deposit.utils.security import mask_address


class PreflightAggregator:
    """
    Aggregates balance, protocol, consensus and gas checks for a deposit.

    The gas estimate goes through the same address derivation, deposit
    data construction and independent verification as a real submission,
    so failures there surface here as errors.
    """

    def __init__(
        self,
        ledger: AccountLedger,
        protocol: ProtocolState,
        consensus: ConsensusStatus,
        vault: KeyVault,
        submitter: TransactionSubmitter,
        deposit_amount_gwei: int = VALIDATOR_DEPOSIT_AMOUNT_GWEI,
    ) -> None:
        """
        Initialize pre-flight aggregator.

        Args:
            ledger: Execution-layer account queries
            protocol: Staking protocol state
            consensus: Consensus-layer status
            vault: Node account and validator keys
            submitter: Gas estimation for the deposit call
            deposit_amount_gwei: Amount signed into the validator deposit
        """
        self.ledger = ledger
        self.protocol = protocol
        self.consensus = consensus
        self.vault = vault
        self.submitter = submitter
        self.deposit_amount_gwei = deposit_amount_gwei
        self.resolver = WithdrawalCredentialResolver(protocol)

    async def check(self, request: DepositRequest) -> PreflightResult:
        """
        Run all pre-flight checks for a deposit request.

        Args:
            request: Deposit request (not modified)

        Returns:
            PreflightResult with per-check flags

        Raises:
            NodeNotRegisteredError: If the node is not registered
            DepositVerificationError: If the trial deposit data fails verification
            Exception: Any collaborator error, unchanged
        """
        account = self.vault.account_address()
        if not await self.protocol.is_node_registered(account):
            raise NodeNotRegisteredError(account)

        network_config = await self.consensus.network_config()
        salt = await resolve_salt(request.salt, self.ledger, account)

        results = await gather_checks({
            "balance": self.ledger.balance_of(account),
            "deposits_enabled": self.protocol.deposits_enabled(),
            "is_trusted": self.protocol.is_trusted_member(account),
            "stake_count": self.protocol.stake_count_of(account),
            "stake_limit": self.protocol.stake_limit_of(account),
            "in_consensus": self.consensus.in_consensus(),
            "gas": self._estimate_deposit(request, account, salt, network_config),
        })

        target, gas_info = results["gas"]
        is_trusted = results["is_trusted"]

        result = PreflightResult(
            insufficient_balance=request.amount_wei > results["balance"],
            deposits_disabled=not results["deposits_enabled"],
            insufficient_stake_headroom=results["stake_count"] >= results["stake_limit"],
            invalid_amount=not is_trusted and request.is_zero_amount,
            not_in_consensus=not results["in_consensus"],
            target=target,
            gas_info=gas_info,
            salt=salt,
        )

        # Unbonded minipools only exist for trusted nodes depositing nothing
        if is_trusted and request.is_zero_amount:
            unbonded = await gather_checks({
                "count": self.protocol.unbonded_count_of(account),
                "max": self.protocol.unbonded_max_count(),
            })
            result.unbonded_limit_reached = unbonded["count"] >= unbonded["max"]

        logger.info(
            f"Pre-flight for {mask_address(account)}: "
            f"{'can deposit' if result.can_proceed else 'cannot deposit'}",
            extra=result.as_dict(),
        )
        return result

    async def _estimate_deposit(
        self,
        request: DepositRequest,
        account: str,
        salt: ResolvedSalt,
        network_config: NetworkConfig,
    ) -> tuple[DerivedTarget, GasInfo]:
        """Build and verify trial deposit data, then estimate gas for it."""
        params = self.vault.build_transaction_params(request.amount_wei)

        deposit_type = await self.protocol.deposit_type_of(request.amount_wei)
        key = self.vault.next_validator_key()
        template = await self.protocol.derivation_template()
        target = await self.resolver.resolve_target(template, account, deposit_type, salt)

        # BLS signing is CPU bound
        deposit = await asyncio.to_thread(
            build_deposit_data,
            key,
            target.withdrawal_credentials,
            network_config,
            self.deposit_amount_gwei,
        )
        await asyncio.to_thread(
            verify_deposit_data, deposit, network_config, self.deposit_amount_gwei
        )

        call = build_deposit_call(deposit, request.min_node_fee, salt, target)
        gas_info = await self.submitter.estimate_gas(params, call)
        return target, gas_info
