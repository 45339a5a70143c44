"""Simplified factory for creating an httpx client with signature normalization."""

from __future__ import annotations

from typing import Any

import httpx

from manowar_pay.x402.config import DEFAULT_CHAIN_ID

from .transport import SignatureNormalizingTransport


def create_normalized_http_client(
    *,
    chain_id: int | str = DEFAULT_CHAIN_ID,
    wrapped: httpx.AsyncBaseTransport | None = None,
    enabled: bool = True,
    **httpx_kwargs: Any,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` that normalizes ``X-PAYMENT`` signatures.

    Args:
        chain_id: Target network as a chain id (``43113``), CAIP-2 id
            (``"eip155:43113"``) or x402 network name (``"base-sepolia"``).
            Defaults to Avalanche Fuji.
        wrapped: Transport that actually sends requests (defaults to
            ``httpx.AsyncHTTPTransport()``).
        enabled: When False, requests are sent untouched.
        **httpx_kwargs: Extra keyword arguments forwarded to
            ``httpx.AsyncClient`` (e.g. ``timeout``, ``headers``).

    Returns:
        A configured ``httpx.AsyncClient`` ready for use.

    Example::

        from manowar_pay import create_normalized_http_client

        async with create_normalized_http_client() as client:
            resp = await client.post(
                "https://api.example.com/agents/run",
                headers={"X-PAYMENT": payment_header},
                json={"prompt": "hello"},
            )
    """
    transport = SignatureNormalizingTransport(
        wrapped=wrapped if wrapped is not None else httpx.AsyncHTTPTransport(),
        chain_id=chain_id,
        enabled=enabled,
    )

    return httpx.AsyncClient(transport=transport, **httpx_kwargs)
