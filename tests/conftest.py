"""
Shared fixtures: known mnemonics, secret keys and their addresses.
"""

import pytest

# Mnemonic and the address at tree 0 / account 0
KNOWN_MNEMONIC = "puzzle seed penalty soldier say clay field arctic metal hen cage runway"
KNOWN_MNEMONIC_ADDRESS = "7dpkJCqGUd9iPT5vkAtkrpnDXoZkFLjVEzdam8NRQQ83"

KNOWN_SECRET_KEY_HEX = (
    "813d9157f1ac8af47ae71753f93da1687d606b3e58152ed04fb5b385ca6f4291"
    "0bc08e1c4142d6acd5557175033611a11dd86392799af75dd95c2cedb9665471"
)
KNOWN_SECRET_KEY_ADDRESS = "nsnKdDDJqJp42gdCioeUt3UuzSfYwa7Nyi4GpSyU61e"

# BIP-39 reference vector (all-zero entropy)
ABANDON_MNEMONIC = "abandon " * 11 + "about"

# Valid-looking address that no test keyring ever holds
FOREIGN_ADDRESS = "6s8Yw3pFA7zVQvriZMe1sF8uyBWN8VJq5kc3pAmYcEU2"


class RecordingObserver:
    """Collects keyring notifications in order."""

    def __init__(self):
        self.events = []

    def accounts_added(self, addresses):
        self.events.append(("added", list(addresses)))

    def account_removed(self, address):
        self.events.append(("removed", address))

    def accounts_cleared(self):
        self.events.append(("cleared",))


@pytest.fixture
def known_mnemonic():
    return KNOWN_MNEMONIC


@pytest.fixture
def known_secret_key_hex():
    return KNOWN_SECRET_KEY_HEX


@pytest.fixture
def foreign_address():
    return FOREIGN_ADDRESS


@pytest.fixture
def observer():
    return RecordingObserver()
