"""
Keyring Errors - Closed error-kind taxonomy.

Every failure raised by the wallet package carries a KeyringErrorKind so
callers can branch on the kind instead of matching message text.
"""

from enum import Enum
from typing import Any, Optional


class KeyringErrorKind(str, Enum):
    """All the ways a keyring operation can fail."""
    INVALID_KEY_MATERIAL = "invalid_key_material"
    ADDRESS_NOT_FOUND = "address_not_found"
    INVALID_ORIGIN = "invalid_origin"
    DESERIALIZE_FAILED = "deserialize_failed"
    INVALID_MNEMONIC = "invalid_mnemonic"
    DUPLICATE_ACCOUNT = "duplicate_account"


class KeyringError(Exception):
    """
    Base class for all keyring errors.

    Messages and details must never contain secret key bytes or mnemonics.
    """

    kind: KeyringErrorKind

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.kind.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {type(self.cause).__name__}")
        return " | ".join(parts)

    def to_dict(self) -> dict:
        """Structured form for callers that report errors upstream."""
        result = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result


class InvalidKeyMaterial(KeyringError, ValueError):
    """Key bytes have the wrong length or are otherwise malformed."""
    kind = KeyringErrorKind.INVALID_KEY_MATERIAL


class AddressNotFound(KeyringError, LookupError):
    """No wallet in the keyring has the requested address."""
    kind = KeyringErrorKind.ADDRESS_NOT_FOUND

    def __init__(self, address: str, cause: Optional[BaseException] = None):
        super().__init__(f"Address {address} not found in this keyring",
                         {"address": address}, cause)
        self.address = address


class InvalidOrigin(KeyringError, ValueError):
    """App-key origin is missing or not a non-empty string."""
    kind = KeyringErrorKind.INVALID_ORIGIN


class DeserializeFailed(KeyringError, ValueError):
    """Serialized keyring state could not be loaded."""
    kind = KeyringErrorKind.DESERIALIZE_FAILED


class InvalidMnemonic(KeyringError, ValueError):
    """Mnemonic failed wordlist or checksum validation."""
    kind = KeyringErrorKind.INVALID_MNEMONIC


class DuplicateAccount(KeyringError, ValueError):
    """An insert would place two wallets with one address in a keyring."""
    kind = KeyringErrorKind.DUPLICATE_ACCOUNT

    def __init__(self, address: str):
        super().__init__(f"Address {address} is already in this keyring",
                         {"address": address})
        self.address = address
