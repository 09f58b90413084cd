"""Offline extraction client.

Returns a canned response per extraction schema so the worker can run end to
end without a provider key. Every extractor treats these answers as a low
confidence, mostly empty extraction.
"""

import json
from typing import ClassVar

from roofquote.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Answers with a fixed JSON document keyed by the schema title."""

    RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "classification": {"type": "other", "subType": None},
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        title = str(json_schema.get("title", ""))
        return json.dumps(self.RESPONSES.get(title, {"confidence": 0.5}))
