from unittest.mock import patch

import pytest

from roofquote.config.settings import Settings
from roofquote.extraction.example_client_adapter import ExampleClientAdapter
from roofquote.extraction.factory import ExtractionCapabilityFactory


class TestExtractionCapabilityFactory:
    def test_example_provider_needs_no_key(self) -> None:
        capability = ExtractionCapabilityFactory.create(Settings(extraction_provider="example"))
        assert capability.model == "example"
        assert isinstance(capability._client, ExampleClientAdapter)

    def test_openai_provider_uses_default_base_url(self) -> None:
        settings = Settings(extraction_provider="openai", extraction_openai_api_key="sk-test")
        with patch("roofquote.extraction.factory.OpenAIClientAdapter") as mock_adapter:
            capability = ExtractionCapabilityFactory.create(settings)

        mock_adapter.assert_called_once_with(
            api_key="sk-test", timeout_seconds=60, base_url=None, structured_outputs=True
        )
        assert capability.model == "gpt-4o"

    def test_hosted_compatible_provider_uses_known_base_url(self) -> None:
        settings = Settings(
            extraction_provider="groq",
            extraction_groq_api_key="gsk",
            extraction_groq_model_name="llama-3.3-70b",
        )
        with patch("roofquote.extraction.factory.OpenAIClientAdapter") as mock_adapter:
            capability = ExtractionCapabilityFactory.create(settings)

        assert mock_adapter.call_args.kwargs["base_url"] == "https://api.groq.com/openai/v1"
        assert mock_adapter.call_args.kwargs["structured_outputs"] is False
        assert capability.model == "llama-3.3-70b"

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(extraction_provider="openai_compatible")
        with pytest.raises(ValueError, match="base_url is required"):
            ExtractionCapabilityFactory.create(settings)

    def test_openai_compatible_uses_configured_url(self) -> None:
        settings = Settings(
            extraction_provider="openai_compatible",
            extraction_openai_compatible_base_url="http://llm.internal/v1",
            extraction_openai_compatible_model_name="qwen",
        )
        with patch("roofquote.extraction.factory.OpenAIClientAdapter") as mock_adapter:
            ExtractionCapabilityFactory.create(settings)

        assert mock_adapter.call_args.kwargs["base_url"] == "http://llm.internal/v1"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown extraction provider 'bard'"):
            ExtractionCapabilityFactory.create(Settings(extraction_provider="bard"))

    def test_classifier_model_override(self) -> None:
        settings = Settings(
            extraction_provider="example",
            extraction_classifier_model_name="small-model",
        )
        assert ExtractionCapabilityFactory.create_classifier(settings).model == "small-model"

    def test_classifier_defaults_to_extraction_model(self) -> None:
        settings = Settings(extraction_provider="example")
        assert ExtractionCapabilityFactory.create_classifier(settings).model == "example"
