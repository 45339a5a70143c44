"""Uniform access to the header containers a request may carry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any

import httpx

PAYMENT_HEADER = "X-PAYMENT"


class PaymentHeaders(ABC):
    """Case-insensitive get/set/delete over a request's headers."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the value of *name* in any letter-casing, or None."""

    @abstractmethod
    def set(self, name: str, value: str) -> None:
        """Set *name* using exactly the casing given."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove every casing variant of *name*."""


class HttpxHeadersAdapter(PaymentHeaders):
    def __init__(self, headers: httpx.Headers) -> None:
        self._headers = headers

    def get(self, name: str) -> str | None:
        value: str | None = self._headers.get(name)
        return value

    def set(self, name: str, value: str) -> None:
        self._headers[name] = value

    def delete(self, name: str) -> None:
        # httpx.Headers matches keys case-insensitively and drops all
        # duplicates on delete.
        if name in self._headers:
            del self._headers[name]


class MappingHeadersAdapter(PaymentHeaders):
    def __init__(self, headers: MutableMapping[str, str]) -> None:
        self._headers = headers

    def _matching_keys(self, name: str) -> list[str]:
        lowered = name.lower()
        return [key for key in self._headers if key.lower() == lowered]

    def get(self, name: str) -> str | None:
        for key in self._matching_keys(name):
            value = self._headers[key]
            if value:
                return value
        return None

    def set(self, name: str, value: str) -> None:
        self._headers[name] = value

    def delete(self, name: str) -> None:
        for key in self._matching_keys(name):
            del self._headers[key]


def adapt_headers(headers: Any) -> PaymentHeaders | None:
    """Wrap *headers* in the matching adapter; None when there are no headers."""
    if headers is None:
        return None
    if isinstance(headers, httpx.Headers):
        return HttpxHeadersAdapter(headers)
    if isinstance(headers, MutableMapping):
        return MappingHeadersAdapter(headers)
    raise TypeError(f"Unsupported header container: {type(headers).__name__}")
