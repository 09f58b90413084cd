import base64
from typing import Any

import httpx

from roofquote.logging.logger import Log
from roofquote.ocr.base import BaseOcrEngine
from roofquote.ocr.exceptions import OcrError, OcrNetworkError
from roofquote.ocr.models import OcrResult

MISTRAL_CONFIDENCE = 0.9
OCR_INSTRUCTION = (
    "Extract all text from this document. Preserve the structure and formatting "
    "as much as possible. Include all numbers, measurements, and line items."
)


def build_ocr_payload(content: bytes, mime_type: str, model: str, max_tokens: int) -> dict[str, Any]:
    """Vision chat request carrying the file as a base64 data URI."""
    encoded = base64.b64encode(content).decode("ascii")
    return {
        "model": model,
        "max_tokens": max_tokens,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": OCR_INSTRUCTION},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                    },
                ],
            }
        ],
    }


class MistralOcrAdapter(BaseOcrEngine):
    """OCR through Mistral's multimodal chat completions endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        max_tokens: int,
        timeout_seconds: int,
        client: httpx.Client | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._headers = {"Authorization": f"Bearer {api_key}"}

    def extract(self, content: bytes, mime_type: str) -> OcrResult:
        payload = build_ocr_payload(content, mime_type, self._model, self._max_tokens)
        Log.debug(f"Sending {len(content)} bytes of {mime_type} to Mistral OCR")
        try:
            response = self._client.post(self._url, json=payload, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise OcrNetworkError(
                f"Mistral OCR failed: {exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrNetworkError(f"Mistral OCR network error: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise OcrError(f"Mistral OCR returned invalid JSON: {exc}") from exc
        return OcrResult(
            text=self._message_text(data),
            provider="mistral",
            confidence=MISTRAL_CONFIDENCE,
        )

    @staticmethod
    def _message_text(data: Any) -> str:
        """First choice's content, or "" when the response has none."""
        if not isinstance(data, dict):
            return ""
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else ""
