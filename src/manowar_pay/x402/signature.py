"""ECDSA recovery-byte normalization.

Signers disagree on how the recovery identifier ``v`` is encoded:

* yParity form: ``0`` / ``1`` (EIP-2930 / EIP-1559 style signers)
* legacy form: ``27`` / ``28`` (``eth_sign`` / pre-EIP-155)
* EIP-155 form: ``chain_id * 2 + 35 + yParity``

Facilitators on some networks (Avalanche Fuji among them) only accept the
legacy form, so signatures are rewritten before they leave the client.
"""

from __future__ import annotations

import logging
import string

logger = logging.getLogger(__name__)

LEGACY_V_BASE = 27
EIP155_V_BASE = 35

# r (32 bytes) + s (32 bytes), hex encoded.
RS_HEX_LENGTH = 128

_HEX_DIGITS = frozenset(string.hexdigits)


class SignatureFormatError(ValueError):
    """Raised when a signature is not a hex-encoded ``r || s || v`` value."""


def split_signature(signature: str) -> tuple[str, str, int]:
    """Split a hex signature into ``(prefix, rs_hex, v)``.

    ``prefix`` is the ``0x`` marker as given, or ``""`` when absent.
    The ``v`` suffix is normally a single byte but may be longer for
    EIP-155 signatures on chains whose id does not fit in one byte.
    """
    prefix = signature[:2] if signature[:2].lower() == "0x" else ""
    body = signature[len(prefix) :]

    if not body or not _HEX_DIGITS.issuperset(body):
        raise SignatureFormatError("Signature is not a hex string")

    v_hex = body[RS_HEX_LENGTH:]
    if not v_hex:
        raise SignatureFormatError(
            f"Signature too short: expected at least {RS_HEX_LENGTH + 2} hex "
            f"characters, got {len(body)}"
        )
    if len(v_hex) % 2:
        raise SignatureFormatError(
            f"Recovery id must be whole bytes, got {len(v_hex)} hex characters"
        )

    return prefix, body[:RS_HEX_LENGTH], int(v_hex, 16)


def _normalize_v(v: int, chain_id: int) -> int:
    if v in (0, 1):
        return v + LEGACY_V_BASE
    if v in (LEGACY_V_BASE, LEGACY_V_BASE + 1):
        return v
    if v >= EIP155_V_BASE:
        y_parity = (v - EIP155_V_BASE - chain_id * 2) % 2
        return y_parity + LEGACY_V_BASE

    logger.warning("Unrecognized signature recovery id v=%s, leaving unchanged", v)
    return v


def normalize_signature_v(signature: str, chain_id: int) -> str:
    """Rewrite the recovery id of *signature* into the legacy 27/28 form.

    Only the trailing ``v`` changes; ``r || s`` and any ``0x`` prefix are
    returned as given.  When ``v`` is already legacy the input is returned
    as-is, hex casing included.  Values outside the three known encodings are
    passed through unchanged with a warning.

    Raises:
        SignatureFormatError: if *signature* is not hex, is shorter than
            65 bytes, or *chain_id* is not positive.
    """
    if chain_id <= 0:
        raise SignatureFormatError(f"Chain id must be positive, got {chain_id}")

    prefix, rs_hex, v = split_signature(signature)
    normalized_v = _normalize_v(v, chain_id)
    if normalized_v == v:
        return signature

    return prefix + rs_hex + format(normalized_v, "02x")
