"""
Shared utility functions for the keyring.

Contains hex/bytes helpers used across packages.
"""

from typing import Union


def strip_hex_prefix(value: str) -> str:
    """Remove surrounding whitespace and an optional 0x/0X prefix."""
    value = value.strip()
    if value.startswith("0x") or value.startswith("0X"):
        return value[2:]
    return value


def decode_hex(value: str) -> bytes:
    """
    Decode a hex string (with or without 0x prefix).

    Raises:
        ValueError: If the string is not valid hex
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected a hex string, got {type(value).__name__}")
    return bytes.fromhex(strip_hex_prefix(value))


def to_bytes(payload: Union[str, bytes, bytearray]) -> bytes:
    """Normalize a signing payload; strings are UTF-8 encoded."""
    if isinstance(payload, str):
        return payload.encode('utf-8')
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    raise TypeError(f"Payload must be str or bytes, got {type(payload).__name__}")
