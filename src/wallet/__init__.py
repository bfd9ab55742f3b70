"""
Wallet package - Keypairs and keyrings.

Contains:
- Wallet: Ed25519 keypair with hierarchical and app-key derivation
- SimpleKeyring: Independently generated keypairs
- HDKeyring: Keypairs derived from one mnemonic
- WalletCollection: Ordered, address-unique storage used by both keyrings
- Errors: Closed error-kind taxonomy
"""

from .crypto import (
    Wallet,
    derive_app_key,
    derive_private_key,
    encode_address,
    generate_mnemonic,
    generate_mnemonic_and_wallet,
    is_valid_address,
    is_valid_mnemonic,
    mnemonic_to_seed,
    to_public_key,
    verify_signature,
    SOLANA_DERIVATION_PATH,
    SECRET_KEY_LENGTH,
    PUBLIC_KEY_LENGTH,
)
from .collection import (
    Keyring,
    KeyringObserver,
    WalletCollection,
)
from .keyring import SimpleKeyring, SIMPLE_KEYRING_TYPE
from .hd_keyring import HDKeyring, HD_KEYRING_TYPE
from .errors import (
    KeyringErrorKind,
    KeyringError,
    InvalidKeyMaterial,
    AddressNotFound,
    InvalidOrigin,
    DeserializeFailed,
    InvalidMnemonic,
    DuplicateAccount,
)

__all__ = [
    # Crypto
    "Wallet",
    "derive_app_key",
    "derive_private_key",
    "encode_address",
    "generate_mnemonic",
    "generate_mnemonic_and_wallet",
    "is_valid_address",
    "is_valid_mnemonic",
    "mnemonic_to_seed",
    "to_public_key",
    "verify_signature",
    "SOLANA_DERIVATION_PATH",
    "SECRET_KEY_LENGTH",
    "PUBLIC_KEY_LENGTH",
    # Keyrings
    "Keyring",
    "KeyringObserver",
    "WalletCollection",
    "SimpleKeyring",
    "SIMPLE_KEYRING_TYPE",
    "HDKeyring",
    "HD_KEYRING_TYPE",
    # Errors
    "KeyringErrorKind",
    "KeyringError",
    "InvalidKeyMaterial",
    "AddressNotFound",
    "InvalidOrigin",
    "DeserializeFailed",
    "InvalidMnemonic",
    "DuplicateAccount",
]
