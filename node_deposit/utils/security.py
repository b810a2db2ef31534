"""
Security utilities for masking sensitive data in logs.

Provides functions to safely render:
- Wallet addresses
- Transaction hashes
- Raw byte values (keys, signatures, credentials)
"""


def mask_address(address: str | None) -> str:
    """
    Mask wallet address for logging: 0x1234...5678

    Args:
        address: Wallet address to mask

    Returns:
        Masked address showing first 6 and last 4 characters

    Examples:
        >>> mask_address("0x1234567890abcdef1234567890abcdef12345678")
        '0x1234...5678'
        >>> mask_address(None)
        '***'
    """
    if not address or len(address) < 10:
        return "***"
    return f"{address[:6]}...{address[-4:]}"


def mask_hex(value: str | None) -> str:
    """
    Mask long hex values (tx hashes, pubkeys) for logging.

    Examples:
        >>> mask_hex("0x1234567890abcdef1234567890abcdef")
        '0x12345678...abcdef'
    """
    if not value or len(value) < 16:
        return "***"
    return f"{value[:10]}...{value[-6:]}"


def to_hex(value: bytes | bytearray | None) -> str:
    """
    Stable lowercase 0x-prefixed encoding used in diagnostics.

    Examples:
        >>> to_hex(bytes.fromhex("03000000"))
        '0x03000000'
        >>> to_hex(b"")
        '0x'
    """
    if value is None:
        return "0x"
    return "0x" + bytes(value).hex()
