"""Drop-in wrapper for ``fetch``-style request functions."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

import httpx

from manowar_pay.x402.config import DEFAULT_CHAIN_ID, NormalizationConfig

from .headers import adapt_headers
from .payment_header import (
    NormalizationOutcome,
    NormalizationResult,
    normalize_headers,
)

logger = logging.getLogger(__name__)


class Fetch(Protocol):
    async def __call__(self, url: str, **options: Any) -> httpx.Response: ...


def _copy_headers(headers: Any) -> Any:
    if isinstance(headers, httpx.Headers):
        return httpx.Headers(headers)
    return dict(headers)


class NormalizedFetch:
    """Wrap a ``fetch(url, **options)`` primitive, normalizing ``X-PAYMENT``.

    ``options["headers"]`` may be an ``httpx.Headers`` or a plain dict.  The
    caller's headers are never mutated: a rewritten copy is sent when the
    signature was normalized, otherwise the original object is forwarded.
    Responses and errors from *fetch* reach the caller unchanged.
    """

    def __init__(
        self,
        fetch: Fetch,
        config: NormalizationConfig,
        on_result: Optional[Callable[[NormalizationResult], None]] = None,
    ) -> None:
        self._fetch = fetch
        self._config = config
        self._on_result = on_result

    async def __call__(self, url: str, **options: Any) -> httpx.Response:
        headers = options.get("headers")
        if self._config.enabled and headers is not None:
            rewritten = _copy_headers(headers)
            adapter = adapt_headers(rewritten)
            if adapter is not None:
                result = normalize_headers(adapter, self._config.chain_id)
                if result.outcome is NormalizationOutcome.NORMALIZED:
                    options = {**options, "headers": rewritten}
                if self._on_result is not None:
                    self._on_result(result)

        return await self._fetch(url, **options)


def _client_fetch(client: httpx.AsyncClient | None) -> Fetch:
    async def fetch(url: str, **options: Any) -> httpx.Response:
        method = options.pop("method", "GET")
        if client is not None:
            return await client.request(method, url, **options)
        async with httpx.AsyncClient() as fresh:
            response = await fresh.request(method, url, **options)
            await response.aread()
            return response

    return fetch


def create_normalized_fetch(
    fetch: Fetch | None = None,
    chain_id: int | str = DEFAULT_CHAIN_ID,
    *,
    client: httpx.AsyncClient | None = None,
    enabled: bool = True,
    on_result: Optional[Callable[[NormalizationResult], None]] = None,
) -> NormalizedFetch:
    """Create a fetch function that normalizes x402 payment signatures.

    Args:
        fetch: The request primitive to wrap.  Defaults to
            ``client.request(method, url, ...)`` with ``method`` taken from
            the options (``"GET"`` when absent).
        chain_id: Target network as a chain id, CAIP-2 id or x402 network
            name.  Defaults to Avalanche Fuji (43113).
        client: ``httpx.AsyncClient`` used when *fetch* is omitted; a
            short-lived client is opened per request when this is None too.
        enabled: When False, requests are forwarded untouched.
        on_result: Called with the ``NormalizationResult`` of every request
            that carried headers.

    Example::

        normalized_fetch = create_normalized_fetch(client=client)
        response = await normalized_fetch(
            "https://paid-api.example.com/resource",
            headers={"x-payment": payment_header},
        )
    """
    if fetch is None:
        fetch = _client_fetch(client)
    config = NormalizationConfig.for_network(chain_id, enabled=enabled)
    return NormalizedFetch(fetch, config, on_result=on_result)
