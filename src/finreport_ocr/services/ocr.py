"""OCR client and per-report OCR orchestration."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import httpx

from ..core.config import AppSettings
from ..core.logging import get_logger

logger = get_logger(__name__)

OCR_SPACE_ENDPOINT = "https://api.ocr.space/parse/image"


class OCRError(RuntimeError):
    """OCR for one image failed."""


class OCRTimeoutError(OCRError):
    """The OCR request was aborted client-side."""


class TextRecognizer(Protocol):
    async def recognize(self, image_ref: str) -> str:
        ...


@dataclass(slots=True)
class OCRSpaceClient:
    """Send one image URL to the OCR.space parse endpoint."""

    api_key: str | None
    endpoint: str = OCR_SPACE_ENDPOINT
    language: str = "eng"
    engine: int = 2
    request_timeout: float = 12.0
    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "OCRSpaceClient":
        return cls(
            api_key=settings.ocr_api_key,
            endpoint=settings.ocr_endpoint,
            language=settings.ocr_language,
            engine=settings.ocr_engine,
            request_timeout=settings.ocr_request_timeout,
        )

    async def recognize(self, image_ref: str) -> str:
        if not self.api_key:
            raise OCRError("OCR API key not configured")

        form = {
            "url": image_ref,
            "apikey": self.api_key,
            "language": self.language,
            "isOverlayRequired": "false",
            "scale": "true",
            # Engine 2 handles structured documents better.
            "OCREngine": str(self.engine),
        }

        try:
            async with httpx.AsyncClient(timeout=self.request_timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, data=form)
        except httpx.TimeoutException as exc:
            raise OCRTimeoutError(f"OCR request timed out after {self.request_timeout}s") from exc

        if response.is_error:
            raise OCRError(f"OCR HTTP error: status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise OCRError(f"Non-JSON OCR response: {response.text[:200]}") from exc

        return _parsed_text(payload)


def _parsed_text(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise OCRError("Malformed OCR response")

    results = payload.get("ParsedResults")
    if results is not None and not isinstance(results, list):
        raise OCRError(f"Malformed OCR response: ParsedResults is {type(results).__name__}")
    if payload.get("OCRExitCode") == 1 and results:
        first = results[0]
        text = first.get("ParsedText") if isinstance(first, dict) else None
        if isinstance(text, str):
            return text
        raise OCRError("Malformed OCR response: first parsed result carries no text")

    message = payload.get("ErrorMessage")
    if isinstance(message, list):
        message = "; ".join(str(item) for item in message)
    raise OCRError(f"OCR failed: {message or 'Unknown error'}")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


@dataclass(slots=True)
class OCROrchestrator:
    """Run OCR over all images of one report concurrently.

    A failed or timed-out image contributes an empty string, whatever the
    recognizer raised. Results are joined in image order, not completion
    order.
    """

    recognizer: TextRecognizer
    image_timeout: float = 15.0

    async def extract_text(self, image_refs: Sequence[str]) -> str:
        results = await asyncio.gather(*(self._recognize_one(ref) for ref in image_refs))
        recovered = sum(1 for text in results if text)
        logger.info("ocr.report.completed", images=len(image_refs), recovered=recovered)
        return "\n\n".join(results)

    async def _recognize_one(self, image_ref: str) -> str:
        try:
            text = await asyncio.wait_for(self.recognizer.recognize(image_ref), timeout=self.image_timeout)
        except asyncio.TimeoutError:
            logger.warning("ocr.image.timeout", image_ref=image_ref, timeout=self.image_timeout)
            return ""
        except (OCRError, httpx.HTTPError) as exc:
            logger.warning("ocr.image.failed", image_ref=image_ref, error=str(exc))
            return ""
        except Exception as exc:
            logger.warning("ocr.image.failed", image_ref=image_ref, error=repr(exc), exc_info=True)
            return ""

        if not isinstance(text, str):
            logger.warning("ocr.image.failed", image_ref=image_ref, error=f"non-text result {type(text).__name__}")
            return ""
        return normalize_newlines(text)
