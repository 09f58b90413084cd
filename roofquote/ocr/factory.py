from roofquote.config.settings import Settings
from roofquote.ocr.base import BaseOcrEngine
from roofquote.ocr.mistral_adapter import MistralOcrAdapter
from roofquote.ocr.pdfplumber_adapter import PdfPlumberAdapter
from roofquote.ocr.pymupdf_adapter import PyMuPdfAdapter


class OcrEngineFactory:
    """Creates the OCR engine named by ``settings.ocr_engine``."""

    TEXT_LAYER_ADAPTERS: dict[str, type[BaseOcrEngine]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        if engine == "mistral":
            return MistralOcrAdapter(
                api_key=settings.mistral_api_key,
                base_url=settings.mistral_base_url,
                model=settings.mistral_model_name,
                max_tokens=settings.mistral_max_tokens,
                timeout_seconds=settings.mistral_timeout_seconds,
            )
        adapter_cls = cls.TEXT_LAYER_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown OCR engine '{engine}'. "
                f"Choose from: {['mistral', *cls.TEXT_LAYER_ADAPTERS]}"
            )
        return adapter_cls()
