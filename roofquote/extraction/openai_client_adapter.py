import json

import httpx
import openai

from roofquote.extraction.client_base import BaseExtractionClient
from roofquote.extraction.exceptions import ExtractionError, ExtractionNetworkError

SCHEMA_INSTRUCTION = "Respond with a single JSON object matching this JSON schema:"


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction client built on the OpenAI-compatible chat completions API.

    With ``structured_outputs`` the schema goes out as a non-strict
    ``json_schema`` response format; strict mode would reject the optional
    fields the extraction schemas carry. Providers without structured
    outputs get JSON mode and the schema appended to the system prompt.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        structured_outputs: bool = False,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self._structured_outputs = structured_outputs

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
        if self._structured_outputs:
            response_format: dict[str, object] = {
                "type": "json_schema",
                "json_schema": {
                    "name": str(json_schema.get("title", "extraction_result")),
                    "strict": False,
                    "schema": json_schema,
                },
            }
        else:
            response_format = {"type": "json_object"}
            system_prompt = f"{system_prompt}\n\n{SCHEMA_INSTRUCTION}\n{json.dumps(json_schema)}"

        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=response_format,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ExtractionError("AI returned empty response")
        return content
