from .factory import create_normalized_http_client
from .fetch import NormalizedFetch, create_normalized_fetch
from .headers import PAYMENT_HEADER
from .payment_header import (
    NormalizationOutcome,
    NormalizationResult,
    normalize_payment_header,
)
from .transport import NORMALIZATION_EXTENSION, SignatureNormalizingTransport

__all__ = [
    "NORMALIZATION_EXTENSION",
    "NormalizationOutcome",
    "NormalizationResult",
    "NormalizedFetch",
    "PAYMENT_HEADER",
    "SignatureNormalizingTransport",
    "create_normalized_fetch",
    "create_normalized_http_client",
    "normalize_payment_header",
]
