"""
Simple Keyring - Independently generated keypairs.

Each account is a fresh random keypair; nothing ties one to another.
The keyring never persists itself: serialize() hands the secret keys to the
caller, who is responsible for encrypting them.
"""

import logging
from collections.abc import Sequence
from typing import Optional, Union

from .collection import KeyringObserver, WalletCollection
from .crypto import Wallet
from .errors import DeserializeFailed, DuplicateAccount, InvalidKeyMaterial

logger = logging.getLogger(__name__)


SIMPLE_KEYRING_TYPE = "Simple Key Pair"


class SimpleKeyring:
    """
    Unordered-by-origin collection of independent wallets.

    Usage:
        keyring = SimpleKeyring()
        addresses = keyring.add_accounts(2)
        exported = keyring.serialize()      # hex secret keys, caller encrypts

        restored = SimpleKeyring(exported)
        restored.get_accounts() == addresses
    """

    type = SIMPLE_KEYRING_TYPE

    def __init__(self, secret_keys: Optional[Sequence[str]] = None,
                 observer: Optional[KeyringObserver] = None):
        self._wallets = WalletCollection(observer)
        if secret_keys:
            self.deserialize(secret_keys)

    def serialize(self) -> list[str]:
        """Hex secret keys of every wallet, in sequence order."""
        return [w.secret_key_hex for w in self._wallets.wallets()]

    def deserialize(self, secret_keys: Optional[Sequence[str]] = None) -> list[str]:
        """
        Replace all wallets with the given hex secret keys.

        Either every entry loads or the keyring is left empty.

        Returns:
            The loaded addresses

        Raises:
            DeserializeFailed: If any entry is malformed or repeated
        """
        if secret_keys is None:
            secret_keys = []
        if isinstance(secret_keys, (str, bytes)) or not isinstance(secret_keys, Sequence):
            self._wallets.clear()
            raise DeserializeFailed("Secret keys must be a list of hex strings")

        wallets = []
        for i, secret_key in enumerate(secret_keys):
            try:
                wallets.append(Wallet.from_secret_key_hex(secret_key))
            except InvalidKeyMaterial as e:
                self._wallets.clear()
                logger.warning(f"Unable to deserialize secret key at index {i}")
                raise DeserializeFailed(
                    "Unable to deserialize the secret keys", {"index": i}, cause=e
                ) from e

        try:
            addresses = self._wallets.replace(wallets)
        except DuplicateAccount as e:
            self._wallets.clear()
            logger.warning(f"Duplicate secret key for {e.address} in serialized keyring")
            raise DeserializeFailed(
                "Serialized keyring contains a duplicate account", {"address": e.address}, cause=e
            ) from e

        logger.info(f"Loaded {len(addresses)} account(s) into simple keyring")
        return addresses

    def add_accounts(self, n: int = 1) -> list[str]:
        """
        Generate n new random wallets.

        Returns:
            Only the newly added addresses
        """
        if not isinstance(n, int) or isinstance(n, bool) or n < 0:
            raise ValueError("Number of accounts must be a non-negative integer")

        new_wallets = [Wallet.generate() for _ in range(n)]
        addresses = self._wallets.extend(new_wallets)
        logger.debug(f"Generated {len(addresses)} account(s)")
        return addresses

    def get_accounts(self) -> list[str]:
        return self._wallets.addresses()

    def get_wallets(self) -> list[Wallet]:
        return self._wallets.wallets()

    def get_wallet(self, index: int) -> Wallet:
        return self._wallets.at(index)

    def export_account(self, address: str) -> str:
        """
        Hex-encoded secret key for an address.

        Raises:
            AddressNotFound: If the address is not in this keyring
        """
        return self._wallets.export_secret(address)

    def remove_account(self, address: str) -> None:
        """
        Raises:
            AddressNotFound: If the address is not in this keyring
        """
        self._wallets.remove(address)

    def get_app_key_address(self, address: str, origin: str) -> str:
        """Address of the wallet derived for (address, origin)."""
        return self._wallets.app_key_wallet(address, origin).address

    def sign_message(self, address: str, payload: Union[str, bytes]) -> bytes:
        return self._wallets.sign(address, payload)

    def sign_transaction(self, address: str, message: bytes) -> bytes:
        """Sign a serialized transaction message with the account's key."""
        return self._wallets.sign(address, message)
