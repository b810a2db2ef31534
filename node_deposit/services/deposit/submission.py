"""
Deposit submission controller.

Runs the deposit as one strictly sequential flow:

    salt -> network check -> new key -> minipool address/credentials ->
    deposit data -> duplicate check -> verification -> nonce ->
    broadcast or dry-run -> persist keys (broadcast only)

Every step depends on the previous one and any failure aborts the flow.
Validator keys are only written to durable storage after the network
accepted the transaction.
"""

import asyncio

from loguru import logger

from node_deposit.config.constants import VALIDATOR_DEPOSIT_AMOUNT_GWEI
from node_deposit.models.deposit import (
    DepositRequest,
    SubmissionOutcome,
    SubmissionStage,
    TransactionParams,
)
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
from node_deposit.utils.exceptions import (
    DuplicateValidatorError,
    KeyPersistenceError,
    NetworkMismatchError,
    NodeNotRegisteredError,
    NonceOverrideError,
    ValidatorStatusCheckError,
)
from node_deposit.utils.security import mask_address, mask_hex, to_hex


class SubmissionController:
    """
    Sequences validator key creation, deposit data checks and submission.

    Each call to submit() creates a fresh validator key. A key from a
    failed attempt is never persisted and never reused.
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
        Initialize submission controller.

        Args:
            ledger: Execution-layer account queries
            protocol: Staking protocol state
            consensus: Consensus-layer status
            vault: Node account and validator keys
            submitter: Deposit transaction submitter
            deposit_amount_gwei: Amount signed into the validator deposit
        """
        self.ledger = ledger
        self.protocol = protocol
        self.consensus = consensus
        self.vault = vault
        self.submitter = submitter
        self.deposit_amount_gwei = deposit_amount_gwei
        self.resolver = WithdrawalCredentialResolver(protocol)

    async def submit(self, request: DepositRequest) -> SubmissionOutcome:
        """
        Create a validator and deposit it, or serialize the transaction.

        Args:
            request: Deposit request

        Returns:
            SubmissionOutcome with tx hash, minipool target and validator pubkey

        Raises:
            NodeNotRegisteredError: If the node is not registered
            NetworkMismatchError: If execution and beacon disagree on the network
            DuplicateValidatorError: If the new pubkey already exists on the beacon chain
            ValidatorStatusCheckError: If the beacon chain could not be queried
            DepositVerificationError: If the deposit data fails verification
            NonceOverrideError: If the nonce override is invalid
            KeyPersistenceError: If the wallet could not be saved after broadcast
            Exception: Any collaborator error, unchanged
        """
        stages = [SubmissionStage.INITIALIZED]

        def advance(stage: SubmissionStage) -> None:
            stages.append(stage)
            logger.debug(f"Deposit stage: {stage.value}")

        account = self.vault.account_address()
        if not await self.protocol.is_node_registered(account):
            raise NodeNotRegisteredError(account)

        network_config = await self.consensus.network_config()

        # 1. Salt
        salt = await resolve_salt(request.salt, self.ledger, account)
        advance(SubmissionStage.SALT_RESOLVED)

        # 2. Execution and beacon clients must agree on the deposit contract
        local_info = await self.protocol.deposit_contract_info()
        beacon_info = await self.consensus.network_identity()
        if not local_info.matches(beacon_info):
            logger.error(
                "Beacon network mismatch",
                extra={
                    "local_network": local_info.network_id,
                    "local_contract": local_info.address,
                    "beacon_network": beacon_info.network_id,
                    "beacon_contract": beacon_info.address,
                },
            )
            raise NetworkMismatchError(local_info, beacon_info)
        advance(SubmissionStage.NETWORK_VERIFIED)

        scrub_period = await self.protocol.scrub_period()
        params = self.vault.build_transaction_params(request.amount_wei)
        deposit_type = await self.protocol.deposit_type_of(request.amount_wei)

        # 3. New validator key, held in memory only
        key = self.vault.create_validator_key()
        advance(SubmissionStage.KEY_CREATED)

        # 4. Minipool address and withdrawal credentials
        template = await self.protocol.derivation_template()
        target = await self.resolver.resolve_target(template, account, deposit_type, salt)
        advance(SubmissionStage.TARGET_DERIVED)

        # 5. Deposit data
        deposit = await asyncio.to_thread(
            build_deposit_data,
            key,
            target.withdrawal_credentials,
            network_config,
            self.deposit_amount_gwei,
        )
        advance(SubmissionStage.DATA_BUILT)

        # 6. The pubkey must not already belong to a validator
        pubkey_hex = to_hex(deposit.public_key)
        try:
            status = await self.consensus.validator_status(deposit.public_key)
        except Exception as e:
            logger.error(f"Validator status check failed for {mask_hex(pubkey_hex)}: {e}")
            raise ValidatorStatusCheckError(pubkey_hex, e) from e
        if status.exists:
            logger.critical(
                f"Validator pubkey {pubkey_hex} already in use by validator {status.index}"
            )
            raise DuplicateValidatorError(target.address, pubkey_hex, status.index)
        advance(SubmissionStage.DUPLICATE_CHECKED)

        # 7. Independent verification
        await asyncio.to_thread(
            verify_deposit_data, deposit, network_config, self.deposit_amount_gwei
        )
        advance(SubmissionStage.VERIFIED)

        # 8. Nonce override
        self._apply_nonce_override(params, request.nonce)
        advance(SubmissionStage.NONCE_APPLIED)

        # 9-10. Broadcast or serialize
        params.no_send = not request.submit
        call = build_deposit_call(deposit, request.min_node_fee, salt, target)
        result = await self.submitter.submit_or_serialize(params, call)

        broadcast = request.submit and result.broadcast
        if not broadcast:
            advance(SubmissionStage.SUBMITTED_DRY_RUN)
            logger.info(
                f"Dry run: deposit transaction {result.tx_hash} was not sent\n"
                f"  Raw: {to_hex(result.raw_transaction)}"
            )
        else:
            advance(SubmissionStage.SUBMITTED_BROADCAST)
            logger.success(
                f"Deposit transaction sent!\n"
                f"  TX: {result.tx_hash}\n"
                f"  Minipool: {target.address}\n"
                f"  Node: {mask_address(account)}"
            )
            try:
                self.vault.persist()
            except Exception as e:
                logger.critical(
                    f"Deposit {result.tx_hash} was broadcast but the wallet could not be saved: {e} "
                    f"(key {mask_hex(pubkey_hex)} kept for the next save)"
                )
                raise KeyPersistenceError(result.tx_hash, pubkey_hex, e) from e
            advance(SubmissionStage.KEY_PERSISTED)

        return SubmissionOutcome(
            tx_hash=result.tx_hash,
            target=target,
            public_key=deposit.public_key,
            salt=salt,
            broadcast=broadcast,
            stages=tuple(stages),
            raw_transaction=None if broadcast else result.raw_transaction,
            scrub_period=scrub_period,
        )

    @staticmethod
    def _apply_nonce_override(params: TransactionParams, nonce: int | None) -> None:
        """
        Replace the transaction nonce if the caller asked for it.

        Raises:
            NonceOverrideError: If the nonce is negative
        """
        if nonce is None:
            return
        if nonce < 0:
            raise NonceOverrideError(f"Error checking for nonce override: invalid nonce {nonce}")
        logger.info(f"Overriding transaction nonce with {nonce}")
        params.nonce = nonce
