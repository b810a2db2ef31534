"""
Independent deposit verifier.

Recomputes the deposit domain from the network configuration and checks
the deposit signature and data root from scratch. This is the last gate
before any ETH moves and runs even though the builder is expected to be
correct.
"""

from loguru import logger
from py_ecc.bls import G2ProofOfPossession as bls

from node_deposit.config.constants import (
    BLS_PUBKEY_LENGTH,
    BLS_SIGNATURE_LENGTH,
    WITHDRAWAL_CREDENTIALS_LENGTH,
)
from node_deposit.models.deposit import DepositData, NetworkConfig
from node_deposit.services.deposit.signing import (
    compute_domain,
    compute_signing_root,
    deposit_message,
)
from node_deposit.utils.exceptions import DepositVerificationError, VerificationDiagnostics
from node_deposit.utils.security import mask_hex, to_hex


def build_diagnostics(
    deposit: DepositData,
    network_config: NetworkConfig,
    amount_gwei: int,
) -> VerificationDiagnostics:
    return VerificationDiagnostics(
        domain_type=to_hex(network_config.domain_type),
        genesis_fork_version=to_hex(network_config.genesis_fork_version),
        genesis_validators_root=to_hex(network_config.genesis_validators_root),
        deposit_amount_gwei=amount_gwei,
        validator_pubkey=to_hex(deposit.public_key),
        withdrawal_credentials=to_hex(deposit.withdrawal_credentials),
        signature=to_hex(deposit.signature),
    )


def _check_lengths(deposit: DepositData) -> str | None:
    if len(deposit.public_key) != BLS_PUBKEY_LENGTH:
        return f"validator pubkey must be {BLS_PUBKEY_LENGTH} bytes"
    if len(deposit.withdrawal_credentials) != WITHDRAWAL_CREDENTIALS_LENGTH:
        return f"withdrawal credentials must be {WITHDRAWAL_CREDENTIALS_LENGTH} bytes"
    if len(deposit.signature) != BLS_SIGNATURE_LENGTH:
        return f"signature must be {BLS_SIGNATURE_LENGTH} bytes"
    return None


def verify_deposit_data(
    deposit: DepositData,
    network_config: NetworkConfig,
    amount_gwei: int,
) -> None:
    """
    Verify deposit data against the expected amount and network.

    The amount is passed separately so that a deposit signed over a
    different amount than the protocol expects is rejected.

    Args:
        deposit: Deposit data to check
        network_config: Network signing parameters
        amount_gwei: Amount the deposit must have been signed over

    Raises:
        DepositVerificationError: If any check fails
    """
    diagnostics = build_diagnostics(deposit, network_config, amount_gwei)

    def fail(reason: str) -> DepositVerificationError:
        logger.error(
            f"Deposit verification failed: {reason}",
            extra=diagnostics.as_dict(),
        )
        return DepositVerificationError(reason, diagnostics)

    length_error = _check_lengths(deposit)
    if length_error:
        raise fail(length_error)

    if deposit.amount_gwei != amount_gwei:
        raise fail(
            f"deposit amount {deposit.amount_gwei} gwei does not match "
            f"expected {amount_gwei} gwei"
        )

    try:
        domain = compute_domain(
            network_config.domain_type,
            network_config.genesis_fork_version,
            network_config.genesis_validators_root,
        )
    except ValueError as e:
        raise fail(f"could not compute deposit domain: {e}") from e

    message = deposit_message(deposit.public_key, deposit.withdrawal_credentials, amount_gwei)
    signing_root = compute_signing_root(message, domain)

    # py_ecc returns False for malformed points instead of raising
    if not bls.Verify(deposit.public_key, signing_root, deposit.signature):
        raise fail("invalid deposit signature")

    expected_root = deposit.compute_root()
    if expected_root != bytes(deposit.data_root):
        raise fail(
            f"deposit data root {to_hex(deposit.data_root)} does not match "
            f"recomputed root {to_hex(expected_root)}"
        )

    logger.debug(f"Deposit data verified for validator {mask_hex(to_hex(deposit.public_key))}")
