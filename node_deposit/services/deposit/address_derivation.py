"""
Minipool address derivation.

Reproduces the CREATE2 address a minipool will be deployed at, from the
node address, the deposit type and the salt. Pure: no I/O.
"""

from eth_abi import encode
from eth_utils import keccak, to_canonical_address, to_checksum_address

from node_deposit.models.deposit import DerivationTemplate

CREATE2_PREFIX = b"\xff"


def compute_node_salt(owner: str, salt: int) -> bytes:
    """keccak256(owner address ‖ uint256 salt)."""
    if salt < 0:
        raise ValueError("Salt cannot be negative")
    return keccak(to_canonical_address(owner) + salt.to_bytes(32, "big"))


def compute_init_code_hash(template: DerivationTemplate, owner: str, deposit_type: int) -> bytes:
    """Hash of the minipool creation code with its constructor arguments."""
    constructor_args = encode(
        ["address", "address", "uint8"],
        [to_checksum_address(template.storage), to_checksum_address(owner), deposit_type],
    )
    return keccak(bytes(template.bytecode) + constructor_args)


def derive_minipool_address(
    template: DerivationTemplate,
    owner: str,
    deposit_type: int,
    salt: int,
) -> str:
    """
    Compute the minipool address for (owner, deposit type, salt).

    Args:
        template: Deployer address, storage address and minipool bytecode
        owner: Node account address
        deposit_type: Deposit size class reported by the protocol
        salt: Resolved salt value

    Returns:
        Checksummed minipool address
    """
    digest = keccak(
        CREATE2_PREFIX
        + to_canonical_address(template.deployer)
        + compute_node_salt(owner, salt)
        + compute_init_code_hash(template, owner, deposit_type)
    )
    return to_checksum_address(digest[12:])
