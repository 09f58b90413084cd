from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific chat clients used by the extractors."""

    @abstractmethod
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
        """Return the provider response as plain text.

        The schema is a hint for providers that support structured output;
        callers still parse the text defensively.

        Raises:
            ExtractionNetworkError: provider unreachable or rejected the call.
            ExtractionError: provider answered without any content.
        """
