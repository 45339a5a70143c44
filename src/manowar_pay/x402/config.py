"""Network and interceptor configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, PositiveInt
from x402.chains import NETWORK_TO_ID

AVALANCHE_FUJI_CHAIN_ID = 43113
DEFAULT_CHAIN_ID = AVALANCHE_FUJI_CHAIN_ID  # Avalanche Fuji


def resolve_chain_id(network: int | str) -> int:
    """Resolve a network identifier to a numeric chain id.

    ``43113``            → ``43113``
    ``"43113"``          → ``43113``
    ``"eip155:43113"``   → ``43113``
    ``"base-sepolia"``   → ``84532``
    """
    if isinstance(network, bool):
        raise ValueError(f"Invalid network: {network!r}")
    if isinstance(network, int):
        chain_id = network
    else:
        value = network.strip()
        if ":" in value:
            value = value.split(":", 1)[1]
        if value.isdigit():
            chain_id = int(value)
        else:
            known = NETWORK_TO_ID.get(value)
            if known is None:
                raise ValueError(f"Unknown network: {network}")
            chain_id = int(known)

    if chain_id <= 0:
        raise ValueError(f"Chain id must be positive, got {chain_id}")
    return chain_id


class NormalizationConfig(BaseModel):
    """Per-interceptor signature normalization settings."""

    chain_id: PositiveInt = DEFAULT_CHAIN_ID
    enabled: bool = True

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_network(
        cls, network: int | str = DEFAULT_CHAIN_ID, enabled: bool = True
    ) -> "NormalizationConfig":
        return cls(chain_id=resolve_chain_id(network), enabled=enabled)
