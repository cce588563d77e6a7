"""Tests for the OCR client and the per-report orchestrator."""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from finreport_ocr.services.ocr import (
    OCRError,
    OCROrchestrator,
    OCRSpaceClient,
    OCRTimeoutError,
    normalize_newlines,
)


def _client(handler, api_key: str | None = "test-key") -> OCRSpaceClient:
    return OCRSpaceClient(api_key=api_key, transport=httpx.MockTransport(handler))


class StubRecognizer:
    """Recognizer returning canned text per image, optionally hanging or failing."""

    def __init__(self, texts: dict[str, str], *, hang: set[str] | None = None, fail: dict[str, Exception] | None = None):
        self._texts = texts
        self._hang = hang or set()
        self._fail = fail or {}
        self.calls: list[str] = []

    async def recognize(self, image_ref: str) -> str:
        self.calls.append(image_ref)
        if image_ref in self._hang:
            await asyncio.sleep(10)
        if image_ref in self._fail:
            raise self._fail[image_ref]
        return self._texts[image_ref]


@pytest.mark.asyncio
async def test_recognize_posts_form_and_returns_parsed_text() -> None:
    seen: dict[str, list[str]] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(parse_qs(request.content.decode()))
        return httpx.Response(200, json={"OCRExitCode": 1, "ParsedResults": [{"ParsedText": "Total Income $1.00"}]})

    text = await _client(handler).recognize("https://example.test/a.png")

    assert text == "Total Income $1.00"
    assert seen["url"] == ["https://example.test/a.png"]
    assert seen["apikey"] == ["test-key"]
    assert seen["OCREngine"] == ["2"]
    assert seen["language"] == ["eng"]


@pytest.mark.asyncio
async def test_recognize_without_api_key_fails_before_any_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
        raise AssertionError("no request expected")

    with pytest.raises(OCRError, match="API key"):
        await _client(handler, api_key=None).recognize("https://example.test/a.png")


@pytest.mark.asyncio
async def test_http_error_status_raises() -> None:
    client = _client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(OCRError, match="status 500"):
        await client.recognize("https://example.test/a.png")


@pytest.mark.asyncio
async def test_failed_exit_code_reports_error_messages() -> None:
    payload = {"OCRExitCode": 3, "ErrorMessage": ["Unable to fetch image", "Timed out"]}
    client = _client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(OCRError, match="Unable to fetch image; Timed out"):
        await client.recognize("https://example.test/a.png")


@pytest.mark.asyncio
async def test_non_json_body_raises() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(OCRError, match="Non-JSON"):
        await client.recognize("https://example.test/a.png")


@pytest.mark.asyncio
async def test_missing_parsed_results_raises() -> None:
    client = _client(lambda request: httpx.Response(200, json={"OCRExitCode": 1, "ParsedResults": []}))

    with pytest.raises(OCRError, match="Unknown error"):
        await client.recognize("https://example.test/a.png")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"OCRExitCode": 1, "ParsedResults": {"0": {"ParsedText": "Total Income $1.00"}}},
        {"OCRExitCode": 1, "ParsedResults": [{"ParsedText": 12}]},
        {"OCRExitCode": 1, "ParsedResults": ["Total Income $1.00"]},
        {"OCRExitCode": 1, "ParsedResults": [{}]},
        ["not", "an", "object"],
    ],
)
async def test_malformed_payload_shapes_raise_ocr_error(payload) -> None:
    client = _client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(OCRError, match="Malformed"):
        await client.recognize("https://example.test/a.png")


@pytest.mark.asyncio
async def test_malformed_payloads_contribute_empty_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if "a.png" in parse_qs(request.content.decode())["url"][0]:
            return httpx.Response(200, json={"OCRExitCode": 1, "ParsedResults": {"0": {"ParsedText": "x"}}})
        return httpx.Response(200, json={"OCRExitCode": 1, "ParsedResults": [{"ParsedText": 12}]})

    text = await OCROrchestrator(_client(handler)).extract_text(
        ["https://example.test/a.png", "https://example.test/b.png"]
    )

    assert text == "\n\n"


@pytest.mark.asyncio
async def test_transport_timeout_becomes_ocr_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(OCRTimeoutError):
        await _client(handler).recognize("https://example.test/a.png")


def test_normalize_newlines() -> None:
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"


@pytest.mark.asyncio
async def test_orchestrator_joins_in_image_order_and_normalises_newlines() -> None:
    recognizer = StubRecognizer({"a": "first\r\nline", "b": "second"})

    text = await OCROrchestrator(recognizer).extract_text(["a", "b"])

    assert text == "first\nline\n\nsecond"
    assert recognizer.calls == ["a", "b"]


@pytest.mark.asyncio
async def test_hanging_image_contributes_empty_text() -> None:
    recognizer = StubRecognizer({"a": "A", "b": "B", "c": "C"}, hang={"b"})

    text = await OCROrchestrator(recognizer, image_timeout=0.05).extract_text(["a", "b", "c"])

    assert text == "A\n\n\n\nC"


@pytest.mark.asyncio
async def test_failing_images_contribute_empty_text() -> None:
    recognizer = StubRecognizer(
        {"a": "A", "b": "B", "c": "C"},
        fail={"a": OCRError("bad image"), "c": httpx.ConnectError("unreachable")},
    )

    text = await OCROrchestrator(recognizer).extract_text(["a", "b", "c"])

    assert text == "\n\nB\n\n"


@pytest.mark.asyncio
async def test_unexpected_recognizer_errors_contribute_empty_text() -> None:
    recognizer = StubRecognizer({"a": "A", "b": "B"}, fail={"a": ValueError("decoder blew up")})

    text = await OCROrchestrator(recognizer).extract_text(["a", "b"])

    assert text == "\n\nB"


class NonTextRecognizer:
    async def recognize(self, image_ref: str):
        return 12


@pytest.mark.asyncio
async def test_non_text_recognizer_result_contributes_empty_text() -> None:
    assert await OCROrchestrator(NonTextRecognizer()).extract_text(["a"]) == ""


@pytest.mark.asyncio
async def test_no_images_yield_empty_text() -> None:
    assert await OCROrchestrator(StubRecognizer({})).extract_text([]) == ""
