from roofquote.extraction.aerial_extractor import AerialExtractor
from roofquote.extraction.capability import ExtractionCapability
from roofquote.extraction.classifier import DocumentClassifier
from roofquote.extraction.factory import ExtractionCapabilityFactory
from roofquote.extraction.header_extractor import HeaderExtractor
from roofquote.extraction.insurance_extractor import InsuranceExtractor
from roofquote.extraction.materials_extractor import MaterialsExtractor
from roofquote.extraction.pipe_jack_extractor import PipeJackExtractor
from roofquote.extraction.vent_extractor import VentExtractor

__all__ = [
    "AerialExtractor",
    "DocumentClassifier",
    "ExtractionCapability",
    "ExtractionCapabilityFactory",
    "HeaderExtractor",
    "InsuranceExtractor",
    "MaterialsExtractor",
    "PipeJackExtractor",
    "VentExtractor",
]
