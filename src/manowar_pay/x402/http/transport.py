"""httpx async transport that normalizes outgoing x402 payment signatures."""

from __future__ import annotations

import logging

import httpx

from manowar_pay.x402.config import DEFAULT_CHAIN_ID, NormalizationConfig

from .headers import HttpxHeadersAdapter
from .payment_header import NormalizationOutcome, normalize_headers

logger = logging.getLogger(__name__)

NORMALIZATION_EXTENSION = "x402_signature_normalization"


class SignatureNormalizingTransport(httpx.AsyncBaseTransport):
    """httpx transport that rewrites ``X-PAYMENT`` signatures to legacy ``v``.

    Some x402 facilitators (e.g. on Avalanche Fuji) reject signatures whose
    recovery id is in yParity (``0``/``1``) or EIP-155 form.  This transport
    decodes the outgoing ``X-PAYMENT`` envelope, rewrites
    ``payload.signature`` to use ``v`` of 27/28 and re-encodes it before
    handing the request to the wrapped transport.  Requests without the header
    and responses are passed through untouched; a header that cannot be
    decoded is sent as-is.

    The path taken is recorded on
    ``request.extensions["x402_signature_normalization"]``.

    Example::

        from manowar_pay.x402.http import SignatureNormalizingTransport

        transport = SignatureNormalizingTransport(
            wrapped=httpx.AsyncHTTPTransport(),
            chain_id=43113,
        )
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(
                "https://paid-api.example.com/resource",
                headers={"X-PAYMENT": payment_header},
            )
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        chain_id: int | str = DEFAULT_CHAIN_ID,
        enabled: bool = True,
    ) -> None:
        self._wrapped = wrapped
        self._config = NormalizationConfig.for_network(chain_id, enabled=enabled)

    @property
    def chain_id(self) -> int:
        return self._config.chain_id

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self._config.enabled:
            result = normalize_headers(
                HttpxHeadersAdapter(request.headers), self._config.chain_id
            )
            request.extensions[NORMALIZATION_EXTENSION] = result.outcome
            if result.outcome is NormalizationOutcome.NORMALIZED:
                logger.debug("Rewrote X-PAYMENT header for %s", request.url)

        return await self._wrapped.handle_async_request(request)

    async def aclose(self) -> None:
        await self._wrapped.aclose()
