"""
HD Keyring - Wallets derived from one mnemonic.

The wallet derived at position i always uses account index i on tree 0
(m/501'/0'/0/i), so {mnemonic, number_of_accounts} is enough to rebuild
the keyring exactly.
"""

import logging
import threading
from typing import Optional, Union

from .collection import KeyringObserver, WalletCollection
from .crypto import (
    Wallet,
    generate_mnemonic,
    is_valid_mnemonic,
    mnemonic_to_seed,
    normalize_mnemonic,
    DEFAULT_MNEMONIC_WORDS,
)
from .errors import DeserializeFailed, InvalidMnemonic

logger = logging.getLogger(__name__)


HD_KEYRING_TYPE = "HD Key Tree"

# Tree (wallet) index used for every account in the keyring
HD_TREE_INDEX = 0


class HDKeyring:
    """
    Keyring whose wallets all come from a single mnemonic.

    Usage:
        keyring = HDKeyring({"mnemonic": phrase, "number_of_accounts": 3})
        keyring.add_accounts(2)             # derives positions 3 and 4
        state = keyring.serialize()         # {"mnemonic": ..., "number_of_accounts": 5}

    A mnemonic is generated on the first add_accounts() call if none was
    supplied. Adding accounts only appends; earlier positions never change.
    Removing an account does not rewind the derivation counter, so removed
    positions are never handed out again.
    """

    type = HD_KEYRING_TYPE

    def __init__(self, opts: Optional[dict] = None,
                 observer: Optional[KeyringObserver] = None,
                 word_count: int = DEFAULT_MNEMONIC_WORDS):
        self._wallets = WalletCollection(observer)
        self._mnemonic: Optional[str] = None
        self._next_index = 0
        self._word_count = word_count
        self._lock = threading.RLock()
        if opts:
            self.deserialize(opts)

    @property
    def mnemonic(self) -> Optional[str]:
        """The seed phrase (sensitive - only show during backup!)."""
        return self._mnemonic

    def get_mnemonic(self) -> Optional[str]:
        return self._mnemonic

    @property
    def number_of_accounts(self) -> int:
        """Count of derived positions (removed accounts included)."""
        return self._next_index

    def serialize(self) -> dict:
        return {
            "mnemonic": self._mnemonic,
            "number_of_accounts": self._next_index,
        }

    def deserialize(self, opts: Optional[dict] = None) -> list[str]:
        """
        Reset the keyring from serialized state.

        Args:
            opts: {"mnemonic": str, "number_of_accounts": int}; the key
                "numberOfAccounts" is also accepted

        Returns:
            Addresses derived during deserialization

        Raises:
            InvalidMnemonic: If the supplied mnemonic fails validation
            DeserializeFailed: If opts or the account count is malformed
        """
        opts = opts or {}
        with self._lock:
            self._wallets.clear()
            self._mnemonic = None
            self._next_index = 0

            if not isinstance(opts, dict):
                raise DeserializeFailed("HD keyring state must be a mapping")

            mnemonic = opts.get("mnemonic")
            count = opts.get("number_of_accounts", opts.get("numberOfAccounts"))

            if count is not None and (not isinstance(count, int) or isinstance(count, bool) or count < 0):
                raise DeserializeFailed(
                    "number_of_accounts must be a non-negative integer",
                    {"number_of_accounts": repr(count)},
                )

            if mnemonic:
                self._init_from_mnemonic(mnemonic)

            if count:
                return self._derive(count)
            return []

    def add_accounts(self, n: int = 1) -> list[str]:
        """
        Derive the next n wallets.

        Returns:
            Only the newly derived addresses
        """
        if not isinstance(n, int) or isinstance(n, bool) or n < 0:
            raise ValueError("Number of accounts must be a non-negative integer")
        with self._lock:
            return self._derive(n)

    def get_accounts(self) -> list[str]:
        return self._wallets.addresses()

    def get_wallets(self) -> list[Wallet]:
        return self._wallets.wallets()

    def get_wallet(self, index: int) -> Wallet:
        return self._wallets.at(index)

    def export_account(self, address: str) -> str:
        """Hex-encoded secret key for an address."""
        return self._wallets.export_secret(address)

    def remove_account(self, address: str) -> None:
        self._wallets.remove(address)

    def get_app_key_address(self, address: str, origin: str) -> str:
        """Address of the wallet derived for (address, origin)."""
        return self._wallets.app_key_wallet(address, origin).address

    def sign_message(self, address: str, payload: Union[str, bytes]) -> bytes:
        return self._wallets.sign(address, payload)

    def sign_transaction(self, address: str, message: bytes) -> bytes:
        return self._wallets.sign(address, message)

    # Private

    def _init_from_mnemonic(self, mnemonic: str) -> None:
        if not isinstance(mnemonic, str) or not is_valid_mnemonic(mnemonic):
            raise InvalidMnemonic("Invalid seed phrase")
        self._mnemonic = normalize_mnemonic(mnemonic)

    def _derive(self, n: int) -> list[str]:
        # Caller holds self._lock
        if self._mnemonic is None:
            self._mnemonic, seed = generate_mnemonic(self._word_count)
            logger.info("Generated new mnemonic for HD keyring")
        else:
            seed = mnemonic_to_seed(self._mnemonic)

        start = self._next_index
        new_wallets = [
            Wallet.from_seed(seed, HD_TREE_INDEX, index)
            for index in range(start, start + n)
        ]
        addresses = self._wallets.insert(new_wallets)
        # Counter moves with the collection, before the observer can raise
        self._next_index = start + n

        if n:
            logger.debug(f"Derived {n} account(s) at positions {start}-{start + n - 1}")
        self._wallets.notify_added(addresses)
        return addresses
