"""
Manowar Pay - x402 payment signature normalization.

Quick start (httpx client):
    from manowar_pay import create_normalized_http_client

    async with create_normalized_http_client(chain_id=43113) as client:
        response = await client.get(
            "https://paid-api.example.com/resource",
            headers={"X-PAYMENT": payment_header},
        )

Quick start (fetch wrapper):
    from manowar_pay import create_normalized_fetch

    normalized_fetch = create_normalized_fetch(client=client)
    response = await normalized_fetch(url, headers={"x-payment": payment_header})

Quick start (signature only):
    from manowar_pay import normalize_signature_v

    legacy = normalize_signature_v(signature_hex, chain_id=43113)
"""

from manowar_pay.x402 import (
    DEFAULT_CHAIN_ID,
    SignatureFormatError,
    normalize_signature_v,
)
from manowar_pay.x402.http import (
    NormalizationOutcome,
    SignatureNormalizingTransport,
    create_normalized_fetch,
    create_normalized_http_client,
)

__version__ = "0.1.0"

__all__ = [
    # Simplified factories (recommended)
    "create_normalized_http_client",
    "create_normalized_fetch",
    # Core
    "normalize_signature_v",
    "DEFAULT_CHAIN_ID",
    # Classes (for type hints)
    "SignatureNormalizingTransport",
    "NormalizationOutcome",
    "SignatureFormatError",
]
