"""Unit tests for log masking helpers."""

from node_deposit.utils.security import mask_address, mask_hex, to_hex


def test_mask_address() -> None:
    assert mask_address("0x1234567890abcdef1234567890abcdef12345678") == "0x1234...5678"
    assert mask_address(None) == "***"
    assert mask_address("0x12") == "***"


def test_mask_hex() -> None:
    assert mask_hex("0x1234567890abcdef1234567890abcdef") == "0x12345678...abcdef"
    assert mask_hex("") == "***"


def test_to_hex() -> None:
    """Hex output is lowercase and always 0x-prefixed."""
    assert to_hex(b"\xAB\x01") == "0xab01"
    assert to_hex(bytearray(b"\x00")) == "0x00"
    assert to_hex(None) == "0x"
