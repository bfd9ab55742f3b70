"""
Test HDKeyring: mnemonic-derived accounts and their serialized state.
"""

import threading

import pytest

from wallet import (
    HDKeyring,
    Keyring,
    Wallet,
    AddressNotFound,
    DeserializeFailed,
    InvalidMnemonic,
    InvalidOrigin,
    KeyringErrorKind,
    is_valid_address,
    is_valid_mnemonic,
    mnemonic_to_seed,
    verify_signature,
)
from conftest import ABANDON_MNEMONIC, KNOWN_MNEMONIC, KNOWN_MNEMONIC_ADDRESS, RecordingObserver


@pytest.fixture
def keyring():
    return HDKeyring({"mnemonic": KNOWN_MNEMONIC, "number_of_accounts": 3})


class TestConstruction:
    """Type tag and initial state"""

    def test_type(self):
        assert HDKeyring.type == "HD Key Tree"

    def test_satisfies_keyring_protocol(self):
        assert isinstance(HDKeyring(), Keyring)

    def test_empty_without_opts(self):
        kr = HDKeyring()
        assert kr.get_accounts() == []
        assert kr.get_mnemonic() is None
        assert kr.serialize() == {"mnemonic": None, "number_of_accounts": 0}

    def test_known_mnemonic_first_address(self, known_mnemonic):
        kr = HDKeyring({"mnemonic": known_mnemonic, "number_of_accounts": 1})
        assert kr.get_accounts() == [KNOWN_MNEMONIC_ADDRESS]

    def test_mnemonic_without_accounts(self, known_mnemonic):
        kr = HDKeyring({"mnemonic": known_mnemonic})
        assert kr.get_accounts() == []
        assert kr.mnemonic == known_mnemonic
        assert kr.add_accounts(1) == [KNOWN_MNEMONIC_ADDRESS]

    def test_mnemonic_is_normalized(self, known_mnemonic):
        kr = HDKeyring({"mnemonic": "  " + known_mnemonic.replace(" ", "\t") + " "})
        assert kr.get_mnemonic() == known_mnemonic


class TestDerivation:
    """Account positions map to account indices on tree 0"""

    def test_positions_match_path(self, keyring):
        seed = mnemonic_to_seed(KNOWN_MNEMONIC)
        expected = [Wallet.from_seed(seed, 0, i).address for i in range(3)]
        assert keyring.get_accounts() == expected

    def test_incremental_equals_batch(self):
        incremental = HDKeyring({"mnemonic": ABANDON_MNEMONIC})
        incremental.add_accounts(3)
        incremental.add_accounts(2)

        batch = HDKeyring({"mnemonic": ABANDON_MNEMONIC, "number_of_accounts": 5})
        assert incremental.get_accounts() == batch.get_accounts()

    def test_add_returns_only_new(self, keyring):
        before = keyring.get_accounts()
        added = keyring.add_accounts(2)
        assert len(added) == 2
        assert keyring.get_accounts() == before + added

    def test_addresses_distinct_and_valid(self, keyring):
        keyring.add_accounts(4)
        accounts = keyring.get_accounts()
        assert len(set(accounts)) == 7
        assert all(is_valid_address(a) for a in accounts)

    def test_zero_is_noop(self, keyring):
        assert keyring.add_accounts(0) == []
        assert keyring.number_of_accounts == 3

    @pytest.mark.parametrize("n", [-1, 2.0, None, True])
    def test_bad_count(self, keyring, n):
        with pytest.raises(ValueError):
            keyring.add_accounts(n)
        assert len(keyring.get_accounts()) == 3


class TestMnemonicGeneration:
    """A mnemonic is created on first use"""

    def test_generated_on_first_add(self):
        kr = HDKeyring()
        added = kr.add_accounts(2)
        mnemonic = kr.get_mnemonic()
        assert mnemonic is not None
        assert is_valid_mnemonic(mnemonic)
        assert len(mnemonic.split(" ")) == 12

        restored = HDKeyring({"mnemonic": mnemonic, "number_of_accounts": 2})
        assert restored.get_accounts() == added

    def test_generated_once(self):
        kr = HDKeyring()
        kr.add_accounts(1)
        mnemonic = kr.get_mnemonic()
        kr.add_accounts(1)
        assert kr.get_mnemonic() == mnemonic

    def test_count_without_mnemonic(self):
        kr = HDKeyring({"number_of_accounts": 2})
        assert len(kr.get_accounts()) == 2
        assert is_valid_mnemonic(kr.get_mnemonic())

    def test_twenty_four_words(self):
        kr = HDKeyring(word_count=24)
        kr.add_accounts(1)
        assert len(kr.get_mnemonic().split(" ")) == 24

    def test_existing_mnemonic_kept(self, keyring):
        keyring.add_accounts(1)
        assert keyring.get_mnemonic() == KNOWN_MNEMONIC


class TestSerialization:
    """serialize / deserialize"""

    def test_serialize(self, keyring):
        assert keyring.serialize() == {
            "mnemonic": KNOWN_MNEMONIC,
            "number_of_accounts": 3,
        }

    def test_round_trip(self, keyring):
        keyring.add_accounts(2)
        restored = HDKeyring()
        restored.deserialize(keyring.serialize())
        assert restored.get_accounts() == keyring.get_accounts()
        assert restored.serialize() == keyring.serialize()

    def test_camel_case_count(self):
        kr = HDKeyring({"mnemonic": KNOWN_MNEMONIC, "numberOfAccounts": 2})
        assert kr.get_accounts()[0] == KNOWN_MNEMONIC_ADDRESS
        assert kr.number_of_accounts == 2

    def test_deserialize_returns_derived(self):
        kr = HDKeyring()
        addresses = kr.deserialize({"mnemonic": KNOWN_MNEMONIC, "number_of_accounts": 2})
        assert addresses == kr.get_accounts()
        assert addresses[0] == KNOWN_MNEMONIC_ADDRESS

    def test_deserialize_replaces_state(self, keyring):
        keyring.deserialize({"mnemonic": ABANDON_MNEMONIC, "number_of_accounts": 1})
        assert keyring.get_mnemonic() == ABANDON_MNEMONIC
        assert len(keyring.get_accounts()) == 1
        assert KNOWN_MNEMONIC_ADDRESS not in keyring.get_accounts()

    def test_deserialize_empty_resets(self, keyring):
        assert keyring.deserialize({}) == []
        assert keyring.get_accounts() == []
        assert keyring.get_mnemonic() is None

    def test_invalid_mnemonic(self, keyring):
        with pytest.raises(InvalidMnemonic) as exc_info:
            keyring.deserialize({"mnemonic": "abandon " * 12, "number_of_accounts": 1})
        assert exc_info.value.kind is KeyringErrorKind.INVALID_MNEMONIC
        assert keyring.get_accounts() == []
        assert keyring.get_mnemonic() is None

    def test_invalid_mnemonic_in_constructor(self):
        with pytest.raises(InvalidMnemonic):
            HDKeyring({"mnemonic": "not a real seed phrase", "number_of_accounts": 1})

    def test_invalid_mnemonic_message_hides_phrase(self):
        phrase = "abandon " * 12
        with pytest.raises(InvalidMnemonic) as exc_info:
            HDKeyring({"mnemonic": phrase})
        assert "abandon" not in str(exc_info.value)

    @pytest.mark.parametrize("count", [-1, "3", 1.5, True])
    def test_bad_account_count(self, count):
        with pytest.raises(DeserializeFailed):
            HDKeyring({"mnemonic": KNOWN_MNEMONIC, "number_of_accounts": count})

    def test_not_a_mapping(self, keyring):
        with pytest.raises(DeserializeFailed):
            keyring.deserialize([KNOWN_MNEMONIC])
        assert keyring.get_accounts() == []


class TestRemoveAccount:
    """Removal and the derivation counter"""

    def test_remove_preserves_order(self, keyring):
        a, b, c = keyring.get_accounts()
        keyring.remove_account(b)
        assert keyring.get_accounts() == [a, c]

    def test_counter_not_rewound(self, keyring):
        removed = keyring.get_accounts()[-1]
        keyring.remove_account(removed)
        added = keyring.add_accounts(1)
        assert added != [removed]
        assert keyring.number_of_accounts == 4

        seed = mnemonic_to_seed(KNOWN_MNEMONIC)
        assert added == [Wallet.from_seed(seed, 0, 3).address]

    def test_serialize_counts_removed_positions(self, keyring):
        keyring.remove_account(keyring.get_accounts()[0])
        assert keyring.serialize()["number_of_accounts"] == 3

    def test_remove_unknown(self, keyring, foreign_address):
        with pytest.raises(AddressNotFound):
            keyring.remove_account(foreign_address)
        assert len(keyring.get_accounts()) == 3


class TestAccountAccess:
    """export_account, get_wallet, app keys and signing"""

    def test_export_matches_derivation(self, keyring):
        seed = mnemonic_to_seed(KNOWN_MNEMONIC)
        assert keyring.export_account(KNOWN_MNEMONIC_ADDRESS) == Wallet.from_seed(seed, 0, 0).secret_key_hex

    def test_export_unknown(self, keyring, foreign_address):
        with pytest.raises(AddressNotFound):
            keyring.export_account(foreign_address)

    def test_get_wallet(self, keyring):
        assert keyring.get_wallet(0).address == KNOWN_MNEMONIC_ADDRESS
        with pytest.raises(IndexError):
            keyring.get_wallet(3)

    def test_app_key_separate_from_hd_accounts(self, keyring):
        app_address = keyring.get_app_key_address(KNOWN_MNEMONIC_ADDRESS, "https://dapp.example")
        assert app_address not in keyring.get_accounts()
        assert app_address == keyring.get_app_key_address(KNOWN_MNEMONIC_ADDRESS, "https://dapp.example")

    def test_app_key_invalid_origin(self, keyring):
        with pytest.raises(InvalidOrigin):
            keyring.get_app_key_address(KNOWN_MNEMONIC_ADDRESS, "")

    def test_sign_message(self, keyring):
        signature = keyring.sign_message(KNOWN_MNEMONIC_ADDRESS, b"payload")
        assert verify_signature(KNOWN_MNEMONIC_ADDRESS, signature, b"payload")

    def test_sign_transaction(self, keyring):
        address = keyring.get_accounts()[1]
        signature = keyring.sign_transaction(address, b"\x01\x02")
        assert verify_signature(address, signature, b"\x01\x02")


class TestObserver:
    """Change notifications"""

    def test_events(self, observer):
        kr = HDKeyring({"mnemonic": KNOWN_MNEMONIC}, observer=observer)
        added = kr.add_accounts(2)
        kr.remove_account(added[1])
        kr.deserialize({"mnemonic": KNOWN_MNEMONIC, "number_of_accounts": 1})
        assert observer.events == [
            ("added", added),
            ("removed", added[1]),
            ("cleared",),
            ("added", [KNOWN_MNEMONIC_ADDRESS]),
        ]

    def test_failing_observer_keeps_counter_in_step(self):
        class FailingObserver(RecordingObserver):
            def accounts_added(self, addresses):
                raise RuntimeError("observer failed")

        kr = HDKeyring({"mnemonic": KNOWN_MNEMONIC}, observer=FailingObserver())
        with pytest.raises(RuntimeError):
            kr.add_accounts(2)

        assert len(kr.get_accounts()) == 2
        assert kr.serialize()["number_of_accounts"] == 2

        with pytest.raises(RuntimeError):
            kr.add_accounts(1)
        seed = mnemonic_to_seed(KNOWN_MNEMONIC)
        assert kr.get_accounts() == [Wallet.from_seed(seed, 0, i).address for i in range(3)]

        restored = HDKeyring(kr.serialize())
        assert restored.get_accounts() == kr.get_accounts()


class TestConcurrency:
    """Concurrent callers on one keyring"""

    def test_parallel_add_accounts_get_disjoint_positions(self):
        threads_count, per_thread = 8, 3
        kr = HDKeyring({"mnemonic": KNOWN_MNEMONIC})
        results = []
        errors = []

        def worker():
            try:
                results.append(kr.add_accounts(per_thread))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        total = threads_count * per_thread
        expected = HDKeyring({"mnemonic": KNOWN_MNEMONIC, "number_of_accounts": total})
        assert kr.get_accounts() == expected.get_accounts()
        assert kr.number_of_accounts == total
        assert sorted(a for batch in results for a in batch) == sorted(expected.get_accounts())
