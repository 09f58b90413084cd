from roofquote.extraction.client_base import BaseExtractionClient
from roofquote.extraction.json_parser import Fallback, ParseResult, parse_json_object
from roofquote.logging.logger import Log


class ExtractionCapability:
    """A configured model behind a provider client.

    Built once at startup and shared by every extractor. Provider errors
    propagate; malformed output comes back as a ``Fallback``.
    """

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.1,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))

    @property
    def model(self) -> str:
        return self._model

    def with_model(self, model: str) -> "ExtractionCapability":
        """Same client and temperature, different model."""
        return ExtractionCapability(
            client=self._client, model=model, temperature=self._temperature
        )

    def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        max_tokens: int = 2048,
    ) -> str:
        Log.debug(f"Extraction prompt ({json_schema.get('title', 'untitled')}):\n{user_prompt}")
        raw = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=max_tokens,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            json_schema=json_schema,
        )
        Log.debug(f"AI raw response:\n{raw}")
        return raw

    def invoke_json(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        max_tokens: int = 2048,
    ) -> ParseResult:
        raw = self.invoke(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            json_schema=json_schema,
            max_tokens=max_tokens,
        )
        result = parse_json_object(raw)
        if isinstance(result, Fallback):
            Log.warning(
                f"Unparseable {json_schema.get('title', 'extraction')} response: {result.reason}"
            )
        return result
