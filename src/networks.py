"""
Networks - Cluster configurations.

A cluster is always passed explicitly to whatever needs an endpoint;
nothing here selects one globally.
"""

from dataclasses import dataclass, replace
from typing import Optional

from wallet import is_valid_address

# ============================================
# Cluster Configurations
# ============================================

@dataclass(frozen=True)
class ClusterConfig:
    """Configuration for a cluster (RPC endpoint)."""
    name: str
    display_name: str
    rpc_url: str
    is_testnet: bool
    native_symbol: str = "SOL"
    native_decimals: int = 9  # lamports per SOL = 10**9

    def with_rpc_url(self, rpc_url: str) -> "ClusterConfig":
        """Copy of this cluster pointing at a custom RPC endpoint."""
        if not rpc_url or not rpc_url.startswith(("http://", "https://")):
            raise ValueError(f"RPC URL must be http(s), got {rpc_url!r}")
        return replace(self, rpc_url=rpc_url)


CLUSTERS = {
    "mainnet-beta": ClusterConfig(
        name="mainnet-beta",
        display_name="Mainnet Beta",
        rpc_url="https://api.mainnet-beta.solana.com",
        is_testnet=False,
    ),
    "testnet": ClusterConfig(
        name="testnet",
        display_name="Testnet",
        rpc_url="https://api.testnet.solana.com",
        is_testnet=True,
    ),
    "devnet": ClusterConfig(
        name="devnet",
        display_name="Devnet",
        rpc_url="https://api.devnet.solana.com",
        is_testnet=True,
    ),
}

# Default cluster
DEFAULT_CLUSTER = "devnet"


# ============================================
# Utility Functions
# ============================================

def get_cluster(name: str = DEFAULT_CLUSTER) -> ClusterConfig:
    """
    Get cluster config by name.

    Raises:
        ValueError: If the cluster is unknown
    """
    cluster = CLUSTERS.get(name)
    if cluster is None:
        raise ValueError(f"Unknown cluster: {name}")
    return cluster


def get_cluster_by_url(rpc_url: str) -> Optional[ClusterConfig]:
    """Get cluster config by RPC URL."""
    for cluster in CLUSTERS.values():
        if cluster.rpc_url == rpc_url.rstrip("/"):
            return cluster
    return None


def format_lamports(lamports: int, cluster: Optional[ClusterConfig] = None) -> str:
    """Format a lamport amount as native units, e.g. 1.5 SOL."""
    cluster = cluster or get_cluster()
    value = lamports / (10 ** cluster.native_decimals)
    return f"{value:.{cluster.native_decimals}f}".rstrip("0").rstrip(".") + f" {cluster.native_symbol}"


def format_address(address: str, chars: int = 4) -> str:
    """Format address as 7dpk...QQ83"""
    if not is_valid_address(address) or len(address) <= chars * 2:
        return address
    return f"{address[:chars]}...{address[-chars:]}"
