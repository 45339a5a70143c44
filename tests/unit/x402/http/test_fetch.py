"""Unit tests for the fetch-style normalizing wrapper."""

import base64
import json
from typing import Any, Dict

import httpx
import pytest
from manowar_pay.x402.http.fetch import create_normalized_fetch
from manowar_pay.x402.http.payment_header import (
    NormalizationOutcome,
    NormalizationResult,
)

RS_HEX = "ef" * 64

PAYMENT_HEADER_VALUE = base64.b64encode(
    json.dumps(
        {"x402Version": 1, "payload": {"signature": RS_HEX + "01", "extra": "kept"}}
    ).encode()
).decode()


def _decode(header_value: str) -> Dict[str, Any]:
    decoded: Dict[str, Any] = json.loads(base64.b64decode(header_value))
    return decoded


class RecordingFetch:
    """Fetch primitive that records calls and returns a fixed response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self._response = response or httpx.Response(200)
        self.calls: list[tuple[str, Dict[str, Any]]] = []

    async def __call__(self, url: str, **options: Any) -> httpx.Response:
        self.calls.append((url, options))
        return self._response


@pytest.mark.asyncio
class TestNormalizedFetch:
    async def test_dict_headers_rewritten_on_copy(self) -> None:
        inner = RecordingFetch()
        normalized_fetch = create_normalized_fetch(inner)

        headers = {"x-payment": PAYMENT_HEADER_VALUE, "Accept": "*/*"}
        await normalized_fetch("https://api.example.com/resource", headers=headers)

        # Caller's mapping is untouched.
        assert headers == {"x-payment": PAYMENT_HEADER_VALUE, "Accept": "*/*"}

        url, options = inner.calls[0]
        assert url == "https://api.example.com/resource"
        sent = options["headers"]
        assert sorted(sent) == ["Accept", "X-PAYMENT"]
        decoded = _decode(sent["X-PAYMENT"])
        assert decoded["payload"] == {"signature": RS_HEX + "1c", "extra": "kept"}

    async def test_httpx_headers_rewritten(self) -> None:
        inner = RecordingFetch()
        normalized_fetch = create_normalized_fetch(inner, chain_id=43113)

        headers = httpx.Headers({"X-Payment": PAYMENT_HEADER_VALUE})
        await normalized_fetch("https://example.com", headers=headers)

        sent = inner.calls[0][1]["headers"]
        assert isinstance(sent, httpx.Headers)
        assert sent is not headers
        assert [name for name, _ in sent.raw] == [b"X-PAYMENT"]
        assert headers["x-payment"] == PAYMENT_HEADER_VALUE

    async def test_no_headers_forwarded_unchanged(self) -> None:
        inner = RecordingFetch()
        normalized_fetch = create_normalized_fetch(inner)

        await normalized_fetch("https://example.com", method="POST", content=b"x")

        assert inner.calls[0] == (
            "https://example.com",
            {"method": "POST", "content": b"x"},
        )

    async def test_invalid_header_forwards_original_object(self) -> None:
        inner = RecordingFetch()
        results: list[NormalizationResult] = []
        normalized_fetch = create_normalized_fetch(inner, on_result=results.append)

        headers = {"X-PAYMENT": "%%% not base64 %%%"}
        await normalized_fetch("https://example.com", headers=headers)

        assert inner.calls[0][1]["headers"] is headers
        assert [r.outcome for r in results] == [
            NormalizationOutcome.PASSTHROUGH_ON_ERROR
        ]

    async def test_on_result_reports_each_path(self) -> None:
        inner = RecordingFetch()
        results: list[NormalizationResult] = []
        normalized_fetch = create_normalized_fetch(inner, on_result=results.append)

        await normalized_fetch("https://example.com", headers={"accept": "*/*"})
        await normalized_fetch(
            "https://example.com", headers={"X-PAYMENT": PAYMENT_HEADER_VALUE}
        )

        assert [r.outcome for r in results] == [
            NormalizationOutcome.PASSTHROUGH_UNCHANGED,
            NormalizationOutcome.NORMALIZED,
        ]

    async def test_disabled_forwards_original(self) -> None:
        inner = RecordingFetch()
        normalized_fetch = create_normalized_fetch(inner, enabled=False)

        headers = {"X-PAYMENT": PAYMENT_HEADER_VALUE}
        await normalized_fetch("https://example.com", headers=headers)

        assert inner.calls[0][1]["headers"] is headers

    async def test_response_returned_untouched(self) -> None:
        response = httpx.Response(402, content=b"payment required")
        normalized_fetch = create_normalized_fetch(RecordingFetch(response))

        result = await normalized_fetch(
            "https://example.com", headers={"X-PAYMENT": PAYMENT_HEADER_VALUE}
        )

        assert result is response

    async def test_fetch_error_propagates(self) -> None:
        async def failing_fetch(url: str, **options: Any) -> httpx.Response:
            raise httpx.ReadTimeout("timed out")

        normalized_fetch = create_normalized_fetch(failing_fetch)

        with pytest.raises(httpx.ReadTimeout):
            await normalized_fetch(
                "https://example.com", headers={"X-PAYMENT": PAYMENT_HEADER_VALUE}
            )

    async def test_defaults_to_client_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"ok")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            normalized_fetch = create_normalized_fetch(client=client)
            response = await normalized_fetch(
                "https://api.example.com/run",
                method="POST",
                headers={"x-payment": PAYMENT_HEADER_VALUE},
                json={"prompt": "hi"},
            )

        assert response.status_code == 200
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"prompt": "hi"}
        decoded = _decode(seen[0].headers["X-PAYMENT"])
        assert decoded["payload"]["signature"] == RS_HEX + "1c"
