"""
SSZ containers and signing helpers for validator deposits.

Mirrors the phase0 beacon chain definitions: the deposit domain is
``domain_type ‖ fork_data_root[:28]`` and a signature covers
``hash_tree_root(SigningData(object_root, domain))``.
"""

from remerkleable.basic import uint64
from remerkleable.byte_arrays import Bytes4, Bytes32, Bytes48, Bytes96
from remerkleable.complex import Container

from node_deposit.config.constants import FORK_VERSION_LENGTH, ZERO_ROOT


class ForkData(Container):
    current_version: Bytes4
    genesis_validators_root: Bytes32


class SigningData(Container):
    object_root: Bytes32
    domain: Bytes32


class DepositMessage(Container):
    pubkey: Bytes48
    withdrawal_credentials: Bytes32
    amount: uint64


class DepositDataContainer(Container):
    pubkey: Bytes48
    withdrawal_credentials: Bytes32
    amount: uint64
    signature: Bytes96


def compute_fork_data_root(fork_version: bytes, genesis_validators_root: bytes = ZERO_ROOT) -> bytes:
    """
    Return the 32-byte fork data root for the fork version and validators root.
    """
    return bytes(ForkData(
        current_version=Bytes4(fork_version),
        genesis_validators_root=Bytes32(genesis_validators_root),
    ).hash_tree_root())


def compute_domain(
    domain_type: bytes,
    fork_version: bytes,
    genesis_validators_root: bytes = ZERO_ROOT,
) -> bytes:
    """
    Return the 32-byte signature domain.

    Raises:
        ValueError: If the domain type or fork version is not 4 bytes long
    """
    if len(domain_type) != 4:
        raise ValueError(f"Domain type must be 4 bytes, got {len(domain_type)}")
    if len(fork_version) != FORK_VERSION_LENGTH:
        raise ValueError(f"Fork version must be {FORK_VERSION_LENGTH} bytes, got {len(fork_version)}")
    fork_data_root = compute_fork_data_root(fork_version, genesis_validators_root)
    return bytes(domain_type) + fork_data_root[:28]


def deposit_message(public_key: bytes, withdrawal_credentials: bytes, amount_gwei: int) -> DepositMessage:
    return DepositMessage(
        pubkey=Bytes48(public_key),
        withdrawal_credentials=Bytes32(withdrawal_credentials),
        amount=uint64(amount_gwei),
    )


def compute_signing_root(message: Container, domain: bytes) -> bytes:
    """
    Return the signing root for an SSZ object under a domain.
    """
    return bytes(SigningData(
        object_root=message.hash_tree_root(),
        domain=Bytes32(domain),
    ).hash_tree_root())


def compute_deposit_data_root(
    public_key: bytes,
    withdrawal_credentials: bytes,
    amount_gwei: int,
    signature: bytes,
) -> bytes:
    """hash_tree_root of the full deposit data, as checked by the deposit contract."""
    return bytes(DepositDataContainer(
        pubkey=Bytes48(public_key),
        withdrawal_credentials=Bytes32(withdrawal_credentials),
        amount=uint64(amount_gwei),
        signature=Bytes96(signature),
    ).hash_tree_root())
