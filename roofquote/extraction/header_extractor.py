from roofquote.extraction.base import SchemaExtractor
from roofquote.extraction.coercion import (
    read_confidence,
    read_object,
    read_optional_quantity,
    read_optional_str,
)
from roofquote.extraction.json_parser import Fallback
from roofquote.extraction.models import HeaderData, HeaderExtraction, RoofMeasurements

DEFAULT_CONFIDENCE = 0.5
MAX_CHARS = 8000


class HeaderExtractor(SchemaExtractor):
    """Customer/policy metadata and scope roof measurements."""

    PROMPT_NAME = "header"
    MAX_TOKENS = 1024

    def extract(self, text: str) -> HeaderExtraction:
        parsed = self._request(text[:MAX_CHARS])
        if isinstance(parsed, Fallback):
            return HeaderExtraction(confidence=DEFAULT_CONFIDENCE)

        data = read_object(parsed.value, "data")
        measurements = read_object(parsed.value, "measurements")
        return HeaderExtraction(
            data=HeaderData(
                customer_name=read_optional_str(data, "customerName"),
                insurance_company=read_optional_str(data, "insuranceCompany"),
                policy_number=read_optional_str(data, "policyNumber"),
                claim_number=read_optional_str(data, "claimNumber"),
                date_of_loss=read_optional_str(data, "dateOfLoss"),
                adjuster_name=read_optional_str(data, "adjusterName"),
            ),
            measurements=RoofMeasurements(
                total_area=read_optional_quantity(measurements, "totalArea"),
                perimeter=read_optional_quantity(measurements, "perimeter"),
                ridge=read_optional_quantity(measurements, "ridge"),
                hip=read_optional_quantity(measurements, "hip"),
                valley=read_optional_quantity(measurements, "valley"),
                eave=read_optional_quantity(measurements, "eave"),
                rake=read_optional_quantity(measurements, "rake"),
            ),
            confidence=read_confidence(parsed.value, DEFAULT_CONFIDENCE),
        )
