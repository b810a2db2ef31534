"""
Exception types for the deposit pipeline.

Categories:
- Transient I/O errors from collaborators are NOT wrapped here; they
  propagate unchanged (Web3Exception, aiohttp.ClientError, timeouts).
- SafetyCheckError: fatal, raised before any fund-moving action.
- PostBroadcastError: the transaction was accepted by the network but a
  later local step failed. Funds have moved.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from node_deposit.models.deposit import DepositContractInfo


class DepositError(Exception):
    """Base exception for deposit pipeline errors."""
    pass


class SecurityError(DepositError):
    """Raised when a security-critical operation fails."""
    pass


class NodeNotRegisteredError(DepositError):
    """Raised when the node account is not registered with the protocol."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"The node {address} is not registered with Rocket Pool.")


class NonceOverrideError(DepositError):
    """Raised when the requested nonce override cannot be applied."""
    pass


class ValidatorStatusCheckError(DepositError):
    """Raised when the beacon chain cannot be queried for an existing validator."""

    def __init__(self, public_key: str, cause: Exception) -> None:
        self.public_key = public_key
        super().__init__(
            f"Error checking for existing validator status: {cause}\n"
            f"Your funds have not been deposited for your own safety."
        )


# ------------------------------------------------------------------------
# Safety-critical failures
# ------------------------------------------------------------------------


class SafetyCheckError(DepositError):
    """Base class for fatal validation failures before broadcast."""
    pass


@dataclass(frozen=True)
class VerificationDiagnostics:
    """Everything needed to re-run the deposit signature check by hand."""

    domain_type: str
    genesis_fork_version: str
    genesis_validators_root: str
    deposit_amount_gwei: int
    validator_pubkey: str
    withdrawal_credentials: str
    signature: str

    def as_dict(self) -> dict:
        return asdict(self)


class DepositVerificationError(SafetyCheckError):
    """Raised when deposit data fails the independent verification."""

    def __init__(self, reason: str, diagnostics: VerificationDiagnostics) -> None:
        self.reason = reason
        self.diagnostics = diagnostics
        super().__init__(self.report())

    def report(self) -> str:
        """Human readable failure report with hex-encoded diagnostics."""
        d = self.diagnostics
        return (
            f"Your deposit failed the validation safety check: {self.reason}\n"
            f"For your safety, this deposit will not be submitted and your ETH will not be staked.\n"
            f"PLEASE REPORT THIS TO THE DEVELOPERS and include the following information:\n"
            f"\tDomain Type: {d.domain_type}\n"
            f"\tGenesis Fork Version: {d.genesis_fork_version}\n"
            f"\tGenesis Validator Root: {d.genesis_validators_root}\n"
            f"\tDeposit Amount: {d.deposit_amount_gwei} gwei\n"
            f"\tValidator Pubkey: {d.validator_pubkey}\n"
            f"\tWithdrawal Credentials: {d.withdrawal_credentials}\n"
            f"\tSignature: {d.signature}\n"
        )


class DuplicateValidatorError(SafetyCheckError):
    """Raised when the new validator pubkey already exists on the beacon chain."""

    def __init__(self, minipool_address: str, public_key: str, index: int | None) -> None:
        self.minipool_address = minipool_address
        self.public_key = public_key
        self.index = index
        super().__init__(
            f"**** ALERT ****\n"
            f"Your minipool {minipool_address} has the following as a validator pubkey:\n"
            f"\t{public_key}\n"
            f"This key is already in use by validator {index} on the Beacon chain!\n"
            f"The deposit will not be submitted for your own safety so you do not get slashed.\n"
            f"PLEASE REPORT THIS TO THE DEVELOPERS.\n"
            f"***************\n"
        )


class NetworkMismatchError(SafetyCheckError):
    """Raised when the execution and beacon views disagree on the deposit contract."""

    def __init__(self, local: DepositContractInfo, beacon: DepositContractInfo) -> None:
        self.local = local
        self.beacon = beacon
        super().__init__(
            f"Beacon network mismatch! Expected {local.address} on chain {local.network_id}, "
            f"but beacon is using {beacon.address} on chain {beacon.network_id}."
        )


# ------------------------------------------------------------------------
# Sequencing errors (after broadcast)
# ------------------------------------------------------------------------


class PostBroadcastError(DepositError):
    """Raised when a step fails after the network accepted the transaction."""

    def __init__(self, message: str, tx_hash: str) -> None:
        self.tx_hash = tx_hash
        super().__init__(message)


class KeyPersistenceError(PostBroadcastError):
    """Raised when validator keys cannot be saved after a successful broadcast."""

    def __init__(self, tx_hash: str, public_key: str, cause: Exception) -> None:
        self.public_key = public_key
        super().__init__(
            f"Deposit transaction {tx_hash} was broadcast, but saving the wallet failed: {cause}\n"
            f"Your ETH HAS been deposited. Back up the validator key {public_key} "
            f"before restarting, or the validator will not be able to attest.",
            tx_hash,
        )
