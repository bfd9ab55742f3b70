"""
Services package - Support services around the keyrings.

Contains:
- configure_logging: Console logging with secret redaction
- Transfer hand-off: Instructions passed to a caller-supplied submitter
"""

from .logging import configure_logging, SecretRedactingFilter
from .transfer import (
    FeeContext,
    TransferInstruction,
    TransferSubmitter,
    build_transfer,
    send_transfer,
)

__all__ = [
    "configure_logging",
    "SecretRedactingFilter",
    "FeeContext",
    "TransferInstruction",
    "TransferSubmitter",
    "build_transfer",
    "send_transfer",
]
