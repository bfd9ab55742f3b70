"""
Logging - Application logging configuration.

Provides:
- Python logging configuration with console output
- A filter that keeps secret-looking hex out of log output
"""

import logging
import re

# Runs this long are secret keys, seeds or derived private keys
_SECRET_HEX = re.compile(r"(?:0x)?[0-9a-fA-F]{64,}")
REDACTED = "[REDACTED]"


class SecretRedactingFilter(logging.Filter):
    """Replace long hex runs in log messages with a placeholder."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Left for the handler to report through handleError()
            return True
        redacted = _SECRET_HEX.sub(REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure Python logging for the application.

    Sets up a root logger with console output and secret redaction.

    Args:
        level: Logging level (default: INFO)
    """
    root_logger = logging.getLogger()

    # Only configure if not already configured
    if root_logger.handlers:
        return

    root_logger.setLevel(level)

    # Console handler with simple format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SecretRedactingFilter())
    root_logger.addHandler(console_handler)
