"""
Wallet Crypto - Keypairs and deterministic derivation.

Industry-standard primitives:
- BIP-39 seed phrases
- BIP-32 hierarchical derivation (secp256k1, path m/501'/{wallet}'/0/{account})
- Ed25519 keypairs, Base58 addresses
- Keccak-256 app-key mixing

Secret bytes only leave a Wallet through secret_key / secret_key_hex.
"""

import hmac
import logging
import secrets
from typing import Union

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from eth_account.hdaccount import key_from_seed
from eth_utils import keccak
from mnemonic import Mnemonic

from utils import decode_hex, to_bytes
from .errors import InvalidKeyMaterial, InvalidMnemonic, InvalidOrigin

logger = logging.getLogger(__name__)


# ============================================
# Constants
# ============================================

# BIP-32 path template: wallet (tree) index, then account index
SOLANA_DERIVATION_PATH = "m/501'/{}'/0/{}"

PRIVATE_KEY_LENGTH = 32    # Ed25519 seed / private scalar
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64     # private key || public key
SIGNATURE_LENGTH = 64

# BIP-39 word counts accepted and their entropy strength in bits
MNEMONIC_STRENGTH = {12: 128, 24: 256}
DEFAULT_MNEMONIC_WORDS = 12

# Highest index usable in a BIP-32 path component
MAX_DERIVATION_INDEX = 2 ** 31 - 1

_mnemo = Mnemonic("english")


# ============================================
# Mnemonics and Seeds
# ============================================

def normalize_mnemonic(phrase: str) -> str:
    """Collapse surrounding and repeated whitespace."""
    return " ".join(phrase.split())


def is_valid_mnemonic(phrase: str) -> bool:
    """Check word count, wordlist membership and checksum."""
    if not isinstance(phrase, str):
        return False
    phrase = normalize_mnemonic(phrase)
    if len(phrase.split(" ")) not in MNEMONIC_STRENGTH:
        return False
    try:
        return _mnemo.check(phrase)
    except (ValueError, LookupError):
        return False


def mnemonic_to_seed(phrase: str) -> bytes:
    """
    Expand a validated mnemonic into its 64-byte BIP-39 seed.

    No passphrase is used.

    Raises:
        InvalidMnemonic: If the phrase fails validation
    """
    if not is_valid_mnemonic(phrase):
        raise InvalidMnemonic("Invalid seed phrase")
    return Mnemonic.to_seed(normalize_mnemonic(phrase), passphrase="")


def generate_mnemonic(word_count: int = DEFAULT_MNEMONIC_WORDS) -> tuple[str, bytes]:
    """
    Create a fresh mnemonic from secure random entropy.

    Args:
        word_count: 12 (128-bit) or 24 (256-bit) words

    Returns:
        (mnemonic, seed)
    """
    if word_count not in MNEMONIC_STRENGTH:
        raise ValueError("word_count must be 12 or 24")

    phrase = _mnemo.generate(strength=MNEMONIC_STRENGTH[word_count])
    return phrase, Mnemonic.to_seed(phrase, passphrase="")


# ============================================
# Addresses
# ============================================

def encode_address(public_key: bytes) -> str:
    """Base58-encode a 32-byte public key."""
    return base58.b58encode(public_key).decode('ascii')


def to_public_key(address: str) -> bytes:
    """
    Decode an address back into its 32 public key bytes.

    Raises:
        InvalidKeyMaterial: If the address is not a valid public key encoding
    """
    if not isinstance(address, str) or not address:
        raise InvalidKeyMaterial("Address must be a non-empty string")
    try:
        public_key = base58.b58decode(address)
    except ValueError as e:
        raise InvalidKeyMaterial(f"Address {address} is not valid base58", cause=e) from e

    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise InvalidKeyMaterial(
            f"Address must decode to {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}",
            {"address": address},
        )
    return public_key


def is_valid_address(address: str) -> bool:
    """True iff the string decodes to a well-formed public key."""
    try:
        to_public_key(address)
        return True
    except InvalidKeyMaterial:
        logger.debug(f"Address {address!r} is invalid")
        return False


# ============================================
# Key Derivation
# ============================================

def _expand_private_key(private_key: bytes) -> bytes:
    """Expand a 32-byte Ed25519 seed into the 64-byte secret key."""
    signing_key = Ed25519PrivateKey.from_private_bytes(private_key)
    public_key = signing_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return private_key + public_key


def derive_private_key(seed: bytes, wallet_index: int = 0, account_index: int = 0) -> bytes:
    """
    Derive the 32-byte private key at m/501'/{wallet_index}'/0/{account_index}.

    Pure function of its inputs.
    """
    for name, index in (("wallet_index", wallet_index), ("account_index", account_index)):
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValueError(f"{name} must be an integer")
        if index < 0 or index > MAX_DERIVATION_INDEX:
            raise ValueError(f"{name} must be between 0 and {MAX_DERIVATION_INDEX}")

    if not isinstance(seed, (bytes, bytearray)) or not seed:
        raise InvalidKeyMaterial("Seed must be non-empty bytes")

    path = SOLANA_DERIVATION_PATH.format(wallet_index, account_index)
    return key_from_seed(bytes(seed), path)


def validate_origin(origin: str) -> str:
    """
    Raises:
        InvalidOrigin: If origin is not a non-empty string
    """
    if not isinstance(origin, str) or not origin:
        raise InvalidOrigin("'origin' must be a non-empty string")
    return origin


def app_key_private_key(secret_key: bytes, origin: str) -> bytes:
    """Mix a secret key with an origin: keccak256(secret_key || utf8(origin))."""
    return keccak(secret_key + validate_origin(origin).encode('utf-8'))


# ============================================
# Wallet Class
# ============================================

class Wallet:
    """
    A single Ed25519 keypair.

    Usage:
        # From a mnemonic
        seed = mnemonic_to_seed(phrase)
        wallet = Wallet.from_seed(seed, 0, 0)

        # From an exported secret key
        wallet = Wallet.from_secret_key_hex(exported_hex)

        address = wallet.address
        signature = wallet.sign(b"payload")

    Address and public key are fixed by the secret key; wallets built from
    equal secret keys compare equal.
    """

    __slots__ = ("_secret_key",)

    def __init__(self, secret_key: bytes):
        """Wrap a complete 64-byte secret key (use the from_* constructors)."""
        if not isinstance(secret_key, (bytes, bytearray)):
            raise InvalidKeyMaterial(
                f"Secret key must be bytes, got {type(secret_key).__name__}"
            )
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise InvalidKeyMaterial(
                f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {len(secret_key)}"
            )
        self._secret_key = bytes(secret_key)

    @classmethod
    def from_seed(cls, seed: bytes, wallet_index: int = 0, account_index: int = 0) -> 'Wallet':
        """
        Derive a wallet from a BIP-39 seed along the hierarchical path.

        Args:
            seed: 64-byte BIP-39 seed
            wallet_index: Tree index (hardened)
            account_index: Account index within the tree
        """
        return cls.from_private_key(derive_private_key(seed, wallet_index, account_index))

    @classmethod
    def from_private_key(cls, private_key: bytes) -> 'Wallet':
        """
        Expand a 32-byte private key into a full keypair.

        Raises:
            InvalidKeyMaterial: If the key is not 32 bytes
        """
        if not isinstance(private_key, (bytes, bytearray)) or len(private_key) != PRIVATE_KEY_LENGTH:
            raise InvalidKeyMaterial(f"Private key must be {PRIVATE_KEY_LENGTH} bytes")
        return cls(_expand_private_key(bytes(private_key)))

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> 'Wallet':
        """Wrap an existing 64-byte secret key without re-deriving it."""
        return cls(secret_key)

    @classmethod
    def from_secret_key_hex(cls, secret_key_hex: str) -> 'Wallet':
        """
        Wrap an exported hex secret key (with or without 0x prefix).

        Raises:
            InvalidKeyMaterial: If the hex is malformed or the wrong length
        """
        try:
            secret_key = decode_hex(secret_key_hex)
        except ValueError as e:
            raise InvalidKeyMaterial("Secret key is not valid hex", cause=e) from e
        return cls(secret_key)

    @classmethod
    def generate(cls) -> 'Wallet':
        """Create a wallet from a cryptographically secure random private key."""
        return cls.from_private_key(secrets.token_bytes(PRIVATE_KEY_LENGTH))

    @property
    def address(self) -> str:
        """Base58 address of the public key."""
        return encode_address(self.public_key)

    @property
    def public_key(self) -> bytes:
        """The 32-byte public key."""
        return self._secret_key[PRIVATE_KEY_LENGTH:]

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    @property
    def secret_key(self) -> bytes:
        """
        The 64-byte secret key.

        WARNING: Handle with extreme care! Only for export and signing.
        """
        return self._secret_key

    @property
    def secret_key_hex(self) -> str:
        """The secret key as 128 hex characters."""
        return self._secret_key.hex()

    # ============================================
    # Signing
    # ============================================

    def sign(self, payload: Union[str, bytes]) -> bytes:
        """
        Sign a payload with the wallet's private key.

        Returns: 64-byte Ed25519 signature
        """
        signing_key = Ed25519PrivateKey.from_private_bytes(self._secret_key[:PRIVATE_KEY_LENGTH])
        return signing_key.sign(to_bytes(payload))

    def verify(self, signature: bytes, payload: Union[str, bytes]) -> bool:
        """Check a signature against this wallet's public key."""
        return verify_signature(self.address, signature, payload)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Wallet):
            return NotImplemented
        return hmac.compare_digest(self._secret_key, other._secret_key)

    def __hash__(self) -> int:
        return hash(self.public_key)

    def __repr__(self) -> str:
        return f"Wallet(address='{self.address}')"


# ============================================
# Helpers
# ============================================

def derive_app_key(secret_key: bytes, origin: str) -> Wallet:
    """Derive the origin-scoped wallet for a base secret key."""
    return Wallet.from_private_key(app_key_private_key(secret_key, origin))


def generate_mnemonic_and_wallet(word_count: int = DEFAULT_MNEMONIC_WORDS) -> tuple[str, Wallet]:
    """Create a fresh mnemonic and the wallet at tree index 1, account 0."""
    phrase, seed = generate_mnemonic(word_count)
    return phrase, Wallet.from_seed(seed, 1, 0)


def verify_signature(address: str, signature: bytes, payload: Union[str, bytes]) -> bool:
    """Verify a signature for an address without holding its secret."""
    try:
        public_key = to_public_key(address)
    except InvalidKeyMaterial:
        return False
    if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(bytes(signature), to_bytes(payload))
        return True
    except (InvalidSignature, ValueError):
        return False
