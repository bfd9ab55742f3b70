"""
Wallet Collection - Ordered, address-unique storage shared by keyrings.

Contains:
- WalletCollection: insertion-ordered wallets keyed by address
- Keyring: the contract both keyring types expose
- KeyringObserver: optional change notifications supplied by the caller
"""

import logging
import threading
from typing import Iterable, Iterator, Optional, Protocol, Union, runtime_checkable

from .crypto import Wallet, derive_app_key, validate_origin
from .errors import AddressNotFound, DuplicateAccount

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyringObserver(Protocol):
    """Receives notifications after a collection has been changed."""

    def accounts_added(self, addresses: list[str]) -> None: ...

    def account_removed(self, address: str) -> None: ...

    def accounts_cleared(self) -> None: ...


@runtime_checkable
class Keyring(Protocol):
    """Operations every keyring type supports."""

    type: str

    def serialize(self): ...

    def deserialize(self, data) -> list[str]: ...

    def add_accounts(self, n: int = 1) -> list[str]: ...

    def get_accounts(self) -> list[str]: ...

    def get_wallets(self) -> list[Wallet]: ...

    def get_wallet(self, index: int) -> Wallet: ...

    def export_account(self, address: str) -> str: ...

    def remove_account(self, address: str) -> None: ...

    def get_app_key_address(self, address: str, origin: str) -> str: ...

    def sign_message(self, address: str, payload: Union[str, bytes]) -> bytes: ...

    def sign_transaction(self, address: str, message: bytes) -> bytes: ...


class WalletCollection:
    """
    Insertion-ordered wallets with unique addresses.

    Order decides serialize/export order; lookups go by address. Every
    mutation takes the collection lock, and a batch insert either adds all
    of its wallets or none of them.
    """

    def __init__(self, observer: Optional[KeyringObserver] = None):
        self._wallets: list[Wallet] = []
        self._lock = threading.RLock()
        self._observer = observer

    def __len__(self) -> int:
        return len(self._wallets)

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return any(w.address == address for w in self._wallets)

    def __iter__(self) -> Iterator[Wallet]:
        return iter(self.wallets())

    def addresses(self) -> list[str]:
        """All addresses, in insertion order."""
        with self._lock:
            return [w.address for w in self._wallets]

    def wallets(self) -> list[Wallet]:
        """Snapshot of all wallets, in insertion order."""
        with self._lock:
            return self._wallets.copy()

    def at(self, index: int) -> Wallet:
        """Wallet at a sequence position (negative positions are rejected)."""
        with self._lock:
            if index < 0 or index >= len(self._wallets):
                raise IndexError("wallet index out of range")
            return self._wallets[index]

    def find(self, address: str) -> Wallet:
        """
        Look up a wallet by address.

        Raises:
            AddressNotFound: If no wallet has that address
        """
        with self._lock:
            for wallet in self._wallets:
                if wallet.address == address:
                    return wallet
        raise AddressNotFound(address)

    def _check_unique(self, wallets: list[Wallet], existing: list[Wallet]) -> None:
        seen = {w.address for w in existing}
        for wallet in wallets:
            address = wallet.address
            if address in seen:
                raise DuplicateAccount(address)
            seen.add(address)

    def insert(self, wallets: Iterable[Wallet]) -> list[str]:
        """
        Append wallets atomically without notifying the observer.

        Owners that keep their own state in step with the collection update
        it before calling notify_added().

        Raises:
            DuplicateAccount: If any address is already present or repeated
        """
        new_wallets = list(wallets)
        with self._lock:
            self._check_unique(new_wallets, self._wallets)
            self._wallets.extend(new_wallets)
        return [w.address for w in new_wallets]

    def notify_added(self, addresses: list[str]) -> None:
        if addresses and self._observer is not None:
            self._observer.accounts_added(addresses)

    def extend(self, wallets: Iterable[Wallet]) -> list[str]:
        """
        Append wallets atomically.

        Returns:
            The addresses added, in order

        Raises:
            DuplicateAccount: If any address is already present or repeated
        """
        added = self.insert(wallets)
        self.notify_added(added)
        return added

    def append(self, wallet: Wallet) -> str:
        """Append a single wallet and return its address."""
        return self.extend([wallet])[0]

    def replace(self, wallets: Iterable[Wallet]) -> list[str]:
        """Swap the whole contents; on a duplicate the old contents stay."""
        new_wallets = list(wallets)
        with self._lock:
            self._check_unique(new_wallets, [])
            had_wallets = bool(self._wallets)
            self._wallets = new_wallets
        if self._observer is not None:
            if had_wallets:
                self._observer.accounts_cleared()
            if new_wallets:
                self._observer.accounts_added([w.address for w in new_wallets])
        return [w.address for w in new_wallets]

    def clear(self) -> None:
        with self._lock:
            had_wallets = bool(self._wallets)
            self._wallets = []
        if had_wallets and self._observer is not None:
            self._observer.accounts_cleared()

    def remove(self, address: str) -> Wallet:
        """
        Remove the wallet with the given address.

        Raises:
            AddressNotFound: If no wallet has that address
        """
        with self._lock:
            for i, wallet in enumerate(self._wallets):
                if wallet.address == address:
                    removed = self._wallets.pop(i)
                    break
            else:
                raise AddressNotFound(address)
        logger.debug(f"Removed account {address}")
        if self._observer is not None:
            self._observer.account_removed(address)
        return removed

    def export_secret(self, address: str) -> str:
        """Hex secret key of the wallet with the given address."""
        return self.find(address).secret_key_hex

    def app_key_wallet(self, address: str, origin: str) -> Wallet:
        """
        Derive the origin-scoped wallet for an address.

        The origin is checked before the address is looked up.

        Raises:
            InvalidOrigin: If origin is not a non-empty string
            AddressNotFound: If no wallet has that address
        """
        validate_origin(origin)
        return derive_app_key(self.find(address).secret_key, origin)

    def sign(self, address: str, payload: Union[str, bytes]) -> bytes:
        """Sign a payload with the wallet for an address."""
        return self.find(address).sign(payload)
