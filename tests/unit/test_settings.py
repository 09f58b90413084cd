import pytest
from pydantic import ValidationError

from roofquote.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_max_job_attempts(self) -> None:
        s = Settings()
        assert s.max_job_attempts == 3

    def test_default_job_poll_interval(self) -> None:
        s = Settings()
        assert s.job_poll_interval_seconds == 5

    def test_default_processing_stale_after(self) -> None:
        s = Settings()
        assert s.processing_stale_after_seconds == 1800

    def test_default_storage_disk(self) -> None:
        s = Settings()
        assert s.storage_disk == "local"

    def test_default_ocr_engine(self) -> None:
        s = Settings()
        assert s.ocr_engine == "mistral"
        assert s.mistral_base_url == "https://api.mistral.ai/v1"

    def test_default_extraction_provider(self) -> None:
        s = Settings()
        assert s.extraction_provider == "openai"
        assert s.extraction_openai_temperature == 0.1

    def test_default_classifier_max_chars(self) -> None:
        s = Settings()
        assert s.classifier_max_chars == 4000


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_ocr_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_ENGINE", "pymupdf")
        s = Settings()
        assert s.ocr_engine == "pymupdf"

    def test_loads_extraction_max_workers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXTRACTION_MAX_WORKERS", "2")
        s = Settings()
        assert s.extraction_max_workers == 2


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_temperature_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXTRACTION_OPENAI_TEMPERATURE", "warm")
        with pytest.raises(ValidationError):
            Settings()
