"""Decode, normalize and re-encode the ``X-PAYMENT`` payment envelope."""

from __future__ import annotations

import base64
import enum
import json
import logging
from typing import Any, Dict, NamedTuple

from x402.encoding import safe_base64_encode

from manowar_pay.x402.signature import normalize_signature_v

from .headers import PAYMENT_HEADER, PaymentHeaders

logger = logging.getLogger(__name__)

# Real envelopes are well under 2 KiB; bounds JSON nesting depth as well.
MAX_PAYMENT_HEADER_LENGTH = 16 * 1024


class NormalizationOutcome(str, enum.Enum):
    NORMALIZED = "normalized"
    PASSTHROUGH_UNCHANGED = "passthrough_unchanged"
    PASSTHROUGH_ON_ERROR = "passthrough_on_error"


class NormalizationResult(NamedTuple):
    """Which path a payment header took, and the value to send."""

    outcome: NormalizationOutcome
    header_value: str | None
    error: str | None = None


def decode_payment_envelope(header_value: str) -> Dict[str, Any]:
    """Decode a base64 ``X-PAYMENT`` value into its JSON object.

    Decoding is strict: unlike browser ``atob``, base64 containing whitespace
    or line breaks is rejected.  Values longer than
    ``MAX_PAYMENT_HEADER_LENGTH`` are rejected before decoding.
    """
    if len(header_value) > MAX_PAYMENT_HEADER_LENGTH:
        raise ValueError(
            f"Payment header too long: {len(header_value)} characters "
            f"(max {MAX_PAYMENT_HEADER_LENGTH})"
        )
    decoded = json.loads(base64.b64decode(header_value, validate=True))
    if not isinstance(decoded, dict):
        raise ValueError(
            f"Payment envelope must be a JSON object, got {type(decoded).__name__}"
        )
    return decoded


def encode_payment_envelope(envelope: Dict[str, Any]) -> str:
    """Encode a payment envelope as a base64 ``X-PAYMENT`` value.

    Serialized compactly (no whitespace), matching ``JSON.stringify`` output
    from browser-side x402 signers, with key order preserved.
    """
    return safe_base64_encode(
        json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)
    )


def _failed(header_value: str, error: Exception) -> NormalizationResult:
    logger.warning('Payment header not normalized: "%s"', error)
    return NormalizationResult(
        NormalizationOutcome.PASSTHROUGH_ON_ERROR, header_value, str(error)
    )


def normalize_payment_header(header_value: str, chain_id: int) -> NormalizationResult:
    """Normalize the signature carried in an ``X-PAYMENT`` header value.

    Never raises for bad input: decode, parse and signature errors yield
    ``PASSTHROUGH_ON_ERROR`` with the original value.
    """
    try:
        envelope = decode_payment_envelope(header_value)
    except (ValueError, RecursionError) as e:
        return _failed(header_value, e)

    payload = envelope.get("payload")
    signature = payload.get("signature") if isinstance(payload, dict) else None
    if not signature:
        logger.debug("Payment envelope has no payload.signature, passing through")
        return NormalizationResult(
            NormalizationOutcome.PASSTHROUGH_UNCHANGED, header_value
        )

    if not isinstance(signature, str):
        return _failed(
            header_value,
            ValueError(f"payload.signature must be a string, got {signature!r}"),
        )

    try:
        normalized = normalize_signature_v(signature, chain_id)
    except ValueError as e:
        return _failed(header_value, e)

    rewritten = {**envelope, "payload": {**payload, "signature": normalized}}
    logger.debug("Normalized payment signature for chain %s", chain_id)
    return NormalizationResult(
        NormalizationOutcome.NORMALIZED, encode_payment_envelope(rewritten)
    )


def normalize_headers(headers: PaymentHeaders, chain_id: int) -> NormalizationResult:
    """Rewrite the ``X-PAYMENT`` header in *headers* in place.

    Headers are only touched when the outcome is ``NORMALIZED``; any prior
    casing variant is removed before the canonical header is written.
    """
    header_value = headers.get(PAYMENT_HEADER)
    if not header_value:
        return NormalizationResult(NormalizationOutcome.PASSTHROUGH_UNCHANGED, None)

    result = normalize_payment_header(header_value, chain_id)
    if result.outcome is NormalizationOutcome.NORMALIZED and result.header_value:
        headers.delete(PAYMENT_HEADER)
        headers.set(PAYMENT_HEADER, result.header_value)
    return result
