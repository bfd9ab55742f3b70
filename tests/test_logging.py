"""
Test logging configuration and secret redaction.
"""

import logging
from contextlib import contextmanager

from services import SecretRedactingFilter, configure_logging
from services.logging import REDACTED
from conftest import KNOWN_SECRET_KEY_HEX


def make_record(msg, args=()):
    return logging.LogRecord("wallet", logging.INFO, __file__, 1, msg, args, None)


class TestSecretRedactingFilter:
    """Long hex runs never reach the output"""

    def test_redacts_secret_key(self):
        record = make_record(f"exported {KNOWN_SECRET_KEY_HEX}")
        assert SecretRedactingFilter().filter(record) is True
        assert record.getMessage() == f"exported {REDACTED}"

    def test_redacts_formatted_args(self):
        record = make_record("key=%s index=%d", ("0x" + KNOWN_SECRET_KEY_HEX, 3))
        SecretRedactingFilter().filter(record)
        assert record.getMessage() == f"key={REDACTED} index=3"

    def test_leaves_short_hex(self):
        public_key = "ab" * 16
        record = make_record("pubkey %s", (public_key,))
        SecretRedactingFilter().filter(record)
        assert record.getMessage() == f"pubkey {public_key}"
        assert record.args == (public_key,)

    def test_mismatched_args_left_for_handler(self):
        record = make_record("two values %s %s", ("only one",))
        assert SecretRedactingFilter().filter(record) is True
        assert record.msg == "two values %s %s"
        assert record.args == ("only one",)


@contextmanager
def bare_root_logger():
    """Run with no root handlers, restoring pytest's own afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers, root.level
    root.handlers = []
    try:
        yield root
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


class TestConfigureLogging:
    """Root logger setup"""

    def test_installs_handler_with_filter(self):
        with bare_root_logger() as root:
            configure_logging(logging.DEBUG)
            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
            assert any(isinstance(f, SecretRedactingFilter) for f in root.handlers[0].filters)

    def test_idempotent(self):
        with bare_root_logger() as root:
            configure_logging()
            configure_logging()
            assert len(root.handlers) == 1

    def test_skips_configured_root(self):
        with bare_root_logger() as root:
            existing = logging.NullHandler()
            root.addHandler(existing)
            configure_logging()
            assert root.handlers == [existing]
