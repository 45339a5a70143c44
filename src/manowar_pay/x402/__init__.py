from .config import DEFAULT_CHAIN_ID, NormalizationConfig, resolve_chain_id
from .signature import SignatureFormatError, normalize_signature_v

__all__ = [
    "DEFAULT_CHAIN_ID",
    "NormalizationConfig",
    "SignatureFormatError",
    "normalize_signature_v",
    "resolve_chain_id",
]
