"""
Deposit data builder.

Signs the validator deposit message and computes the deposit data root.
"""

from decimal import Decimal

from loguru import logger
from py_ecc.bls import G2ProofOfPossession as bls

from node_deposit.config.constants import (
    VALIDATOR_DEPOSIT_AMOUNT_GWEI,
    WITHDRAWAL_CREDENTIALS_LENGTH,
)
from node_deposit.models.deposit import (
    DepositCall,
    DepositData,
    DerivedTarget,
    NetworkConfig,
    ResolvedSalt,
    ValidatorKey,
)
from node_deposit.services.deposit.signing import (
    compute_deposit_data_root,
    compute_domain,
    compute_signing_root,
    deposit_message,
)
from node_deposit.utils.security import mask_hex, to_hex


def build_deposit_data(
    key: ValidatorKey,
    withdrawal_credentials: bytes,
    network_config: NetworkConfig,
    amount_gwei: int = VALIDATOR_DEPOSIT_AMOUNT_GWEI,
) -> DepositData:
    """
    Build signed deposit data for a validator key.

    Args:
        key: Validator key material
        withdrawal_credentials: Credentials bound to the minipool
        network_config: Fork version, validators root and domain type
        amount_gwei: Protocol validator deposit amount (not the node's stake)

    Returns:
        DepositData with signature and data root

    Raises:
        ValueError: If the credentials are not 32 bytes
    """
    if len(withdrawal_credentials) != WITHDRAWAL_CREDENTIALS_LENGTH:
        raise ValueError(
            f"Withdrawal credentials must be {WITHDRAWAL_CREDENTIALS_LENGTH} bytes, "
            f"got {len(withdrawal_credentials)}"
        )

    domain = compute_domain(
        network_config.domain_type,
        network_config.genesis_fork_version,
        network_config.genesis_validators_root,
    )
    message = deposit_message(key.public_key, withdrawal_credentials, amount_gwei)
    signature = bls.Sign(key.secret, compute_signing_root(message, domain))

    data_root = compute_deposit_data_root(
        key.public_key, withdrawal_credentials, amount_gwei, signature
    )

    logger.debug(
        f"Built deposit data for validator {mask_hex(to_hex(key.public_key))}",
        extra={"amount_gwei": amount_gwei, "data_root": to_hex(data_root)},
    )

    return DepositData(
        public_key=bytes(key.public_key),
        withdrawal_credentials=bytes(withdrawal_credentials),
        amount_gwei=amount_gwei,
        signature=bytes(signature),
        data_root=data_root,
    )


def build_deposit_call(
    deposit: DepositData,
    min_node_fee: Decimal,
    salt: ResolvedSalt,
    target: DerivedTarget,
) -> DepositCall:
    """Arguments for the node deposit contract call."""
    return DepositCall(
        min_node_fee=min_node_fee,
        validator_pubkey=deposit.public_key,
        validator_signature=deposit.signature,
        deposit_data_root=deposit.data_root,
        salt=salt.value,
        expected_minipool_address=target.address,
    )
