"""
Deposit models.

Plain dataclasses passed between the deposit pipeline stages.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from enum import Enum

from node_deposit.config.constants import DOMAIN_DEPOSIT, ZERO_ROOT


@dataclass(frozen=True)
class RequestedSalt:
    """
    Salt as requested by the caller.

    Zero means "use the account's current transaction count".
    """

    value: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Salt cannot be negative")

    @classmethod
    def auto(cls) -> "RequestedSalt":
        return cls(0)

    @classmethod
    def explicit(cls, value: int) -> "RequestedSalt":
        return cls(value)

    @property
    def is_auto(self) -> bool:
        return self.value == 0


@dataclass(frozen=True)
class ResolvedSalt:
    """Salt after one-time resolution."""

    value: int
    source: str  # "explicit" or "account_nonce"


@dataclass(frozen=True)
class DepositRequest:
    """
    A single node deposit request.

    Attributes:
        amount_wei: ETH sent with the deposit transaction (wei)
        min_node_fee: Minimum acceptable node commission, as a fraction
        salt: Requested minipool address salt
        submit: Broadcast the transaction (False = dry-run, serialize only)
        nonce: Optional transaction nonce override
    """

    amount_wei: int
    min_node_fee: Decimal
    salt: RequestedSalt = field(default_factory=RequestedSalt.auto)
    submit: bool = False
    nonce: int | None = None

    def __post_init__(self) -> None:
        if self.amount_wei < 0:
            raise ValueError("Deposit amount cannot be negative")
        fee = Decimal(self.min_node_fee)
        if not fee.is_finite() or not Decimal(0) <= fee <= Decimal(1):
            raise ValueError("Minimum node fee must be between 0 and 1")

    @property
    def is_zero_amount(self) -> bool:
        return self.amount_wei == 0


@dataclass(frozen=True)
class NetworkConfig:
    """Signing parameters sourced from the consensus layer."""

    genesis_fork_version: bytes
    genesis_validators_root: bytes = ZERO_ROOT
    domain_type: bytes = DOMAIN_DEPOSIT


@dataclass(frozen=True)
class DerivationTemplate:
    """
    Inputs of the CREATE2 minipool address scheme that come from the chain.

    Attributes:
        deployer: Contract that deploys minipools via CREATE2
        storage: RocketStorage address passed to the minipool constructor
        bytecode: Minipool creation bytecode
    """

    deployer: str
    storage: str
    bytecode: bytes


@dataclass(frozen=True)
class DerivedTarget:
    """Minipool address and the withdrawal credentials bound to it."""

    address: str
    withdrawal_credentials: bytes


@dataclass(frozen=True)
class ValidatorKey:
    """BLS validator key material held by the key vault."""

    secret: int = field(repr=False)
    public_key: bytes


@dataclass(frozen=True)
class DepositData:
    """Canonical validator deposit record."""

    public_key: bytes
    withdrawal_credentials: bytes
    amount_gwei: int
    signature: bytes
    data_root: bytes

    def compute_root(self) -> bytes:
        """Recompute the SSZ hash tree root of the four deposit fields."""
        from node_deposit.services.deposit.signing import compute_deposit_data_root

        return compute_deposit_data_root(
            self.public_key, self.withdrawal_credentials, self.amount_gwei, self.signature
        )


@dataclass(frozen=True)
class ValidatorStatus:
    """Existence of a validator on the beacon chain."""

    exists: bool
    index: int | None = None


@dataclass(frozen=True)
class DepositContractInfo:
    """Network id and deposit contract address as seen by one side."""

    network_id: int
    address: str

    def matches(self, other: "DepositContractInfo") -> bool:
        return (
            self.network_id == other.network_id
            and self.address.lower() == other.address.lower()
        )


@dataclass(frozen=True)
class GasInfo:
    """Gas estimate for the deposit transaction."""

    estimated_gas: int
    safe_gas_limit: int
    gas_price_wei: int

    @property
    def estimated_cost_wei(self) -> int:
        return self.safe_gas_limit * self.gas_price_wei


@dataclass
class TransactionParams:
    """
    Transaction options built by the key vault.

    Attributes:
        from_address: Node account address
        value: ETH value sent with the call (wei)
        nonce: Explicit nonce, or None to use the pending count
        no_send: Sign and serialize without broadcasting
    """

    from_address: str
    value: int
    nonce: int | None = None
    no_send: bool = False


@dataclass(frozen=True)
class DepositCall:
    """Arguments of the node deposit contract call."""

    min_node_fee: Decimal
    validator_pubkey: bytes
    validator_signature: bytes
    deposit_data_root: bytes
    salt: int
    expected_minipool_address: str


@dataclass(frozen=True)
class SubmissionResult:
    """What the transaction submitter returns."""

    tx_hash: str
    raw_transaction: bytes
    broadcast: bool


class SubmissionStage(str, Enum):
    """States of the submission controller."""

    INITIALIZED = "initialized"
    SALT_RESOLVED = "salt_resolved"
    NETWORK_VERIFIED = "network_verified"
    KEY_CREATED = "key_created"
    TARGET_DERIVED = "target_derived"
    DATA_BUILT = "data_built"
    DUPLICATE_CHECKED = "duplicate_checked"
    VERIFIED = "verified"
    NONCE_APPLIED = "nonce_applied"
    SUBMITTED_BROADCAST = "submitted_broadcast"
    SUBMITTED_DRY_RUN = "submitted_dry_run"
    KEY_PERSISTED = "key_persisted"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of a successful submission (broadcast or dry-run)."""

    tx_hash: str
    target: DerivedTarget
    public_key: bytes
    salt: ResolvedSalt
    broadcast: bool
    stages: tuple[SubmissionStage, ...]
    raw_transaction: bytes | None = None
    scrub_period: timedelta | None = None
