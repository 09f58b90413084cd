from typing import Any, ClassVar

from roofquote.config.settings import Settings
from roofquote.extraction.capability import ExtractionCapability
from roofquote.extraction.example_client_adapter import ExampleClientAdapter
from roofquote.extraction.openai_client_adapter import OpenAIClientAdapter


class ExtractionCapabilityFactory:
    """Creates the configured extraction capability."""

    STRUCTURED_OUTPUT_PROVIDERS: ClassVar[frozenset[str]] = frozenset({"openai"})

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> ExtractionCapability:
        """Create the capability used by the domain extractors."""
        provider = settings.extraction_provider.lower()
        if provider == "example":
            return ExtractionCapability(
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
            )
        client = OpenAIClientAdapter(
            api_key=cls._provider_value(provider, settings, "api_key") or "",
            timeout_seconds=cls._provider_value(provider, settings, "timeout_seconds") or 60,
            base_url=cls._resolve_base_url(provider, settings),
            structured_outputs=provider in cls.STRUCTURED_OUTPUT_PROVIDERS,
        )
        return ExtractionCapability(
            client=client,
            model=cls._provider_value(provider, settings, "model_name") or "",
            temperature=settings.extraction_openai_temperature,
        )

    @classmethod
    def create_classifier(cls, settings: Settings) -> ExtractionCapability:
        """Capability for classification, optionally on a cheaper model."""
        capability = cls.create(settings)
        if settings.extraction_classifier_model_name:
            return capability.with_model(settings.extraction_classifier_model_name)
        return capability

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.extraction_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "extraction_openai_compatible_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown extraction provider '{provider}'. Choose from: {supported}"
        )

    @staticmethod
    def _provider_value(provider: str, settings: Settings, suffix: str) -> Any:
        return getattr(settings, f"extraction_{provider}_{suffix}", None)
