"""
Transfer Service - Hands transfer instructions to a network submitter.

The keyring never talks to the network. It builds a TransferInstruction
from a wallet it owns and passes it, with the signing wallet, to a
TransferSubmitter supplied by the caller. Only the submitter's boolean
result is reported back.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, Protocol

from networks import ClusterConfig, format_address, format_lamports, get_cluster
from wallet import Wallet, to_public_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeContext:
    """Fee and blockhash values fetched by the network layer."""
    recent_blockhash: str
    lamports_per_signature: int

    def __post_init__(self):
        if not self.recent_blockhash:
            raise ValueError("recent_blockhash is required")
        if not isinstance(self.lamports_per_signature, int) or self.lamports_per_signature < 0:
            raise ValueError("lamports_per_signature must be a non-negative integer")


@dataclass(frozen=True)
class TransferInstruction:
    """A native transfer, ready for the network layer to sign and send."""
    from_address: str
    to_address: str
    lamports: int
    recent_blockhash: str
    fee_lamports: int        # One signature from the sender
    cluster: str             # Cluster name; the submitter resolves the endpoint

    def to_dict(self) -> dict:
        return asdict(self)


class TransferSubmitter(Protocol):
    """Network collaborator that submits a transfer for a signer."""

    def submit(self, instruction: TransferInstruction, signer: Wallet) -> bool: ...


def build_transfer(
    wallet: Wallet,
    to_address: str,
    lamports: int,
    fee: FeeContext,
    cluster: Optional[ClusterConfig] = None,
) -> TransferInstruction:
    """
    Build a transfer from a wallet to an address.

    Raises:
        InvalidKeyMaterial: If the destination is not a valid address
        ValueError: If the amount is not a positive integer
    """
    to_public_key(to_address)
    if not isinstance(lamports, int) or isinstance(lamports, bool) or lamports <= 0:
        raise ValueError(f"Transfer amount must be a positive integer, got {lamports!r}")

    cluster = cluster or get_cluster()
    return TransferInstruction(
        from_address=wallet.address,
        to_address=to_address,
        lamports=lamports,
        recent_blockhash=fee.recent_blockhash,
        fee_lamports=fee.lamports_per_signature,
        cluster=cluster.name,
    )


def send_transfer(
    submitter: TransferSubmitter,
    wallet: Wallet,
    to_address: str,
    lamports: int,
    fee: FeeContext,
    cluster: Optional[ClusterConfig] = None,
) -> bool:
    """
    Build a transfer and hand it to the submitter.

    Returns:
        The submitter's result; False if it raised
    """
    cluster = cluster or get_cluster()
    instruction = build_transfer(wallet, to_address, lamports, fee, cluster)
    summary = (
        f"{format_lamports(lamports, cluster)} from {format_address(instruction.from_address)} "
        f"to {format_address(to_address)} on {cluster.name}"
    )

    try:
        ok = bool(submitter.submit(instruction, wallet))
    except Exception as e:
        logger.error(f"Transfer of {summary} failed: {e}")
        return False

    if ok:
        logger.info(f"Sent {summary}")
    else:
        logger.warning(f"Transfer of {summary} was not accepted")
    return ok
