from typing import ClassVar

from roofquote.extraction.capability import ExtractionCapability
from roofquote.extraction.json_parser import ParseResult
from roofquote.extraction.prompt_loader import load_prompt, load_schema


class SchemaExtractor:
    """Shared plumbing for extractors backed by a bundled prompt and schema.

    Subclasses name their prompt pair and turn the tagged parse result into
    their own typed value.
    """

    PROMPT_NAME: ClassVar[str]
    MAX_TOKENS: ClassVar[int] = 2048

    def __init__(self, capability: ExtractionCapability) -> None:
        self._capability = capability
        self._system_prompt = load_prompt(self.PROMPT_NAME)
        self._json_schema = load_schema(self.PROMPT_NAME)

    def _request(self, user_prompt: str) -> ParseResult:
        return self._capability.invoke_json(
            system_prompt=self._system_prompt,
            user_prompt=user_prompt,
            json_schema=self._json_schema,
            max_tokens=self.MAX_TOKENS,
        )
