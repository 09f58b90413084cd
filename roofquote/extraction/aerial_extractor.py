from roofquote.extraction.base import SchemaExtractor
from roofquote.extraction.coercion import (
    read_count,
    read_list,
    read_optional_str,
    read_quantity,
    read_str,
)
from roofquote.extraction.json_parser import Fallback
from roofquote.extraction.models import (
    AERIAL_PROVIDERS,
    ROOF_COMPLEXITIES,
    AerialExtraction,
    Slope,
    Structure,
)


def _provider(value: str | None) -> str:
    if value is None:
        return "other"
    value = value.lower()
    return value if value in AERIAL_PROVIDERS else "other"


class AerialExtractor(SchemaExtractor):
    """Measurements from EagleView/RoofScope/Hover style reports."""

    PROMPT_NAME = "aerial"

    def extract(self, text: str, provider_hint: str | None = None) -> AerialExtraction:
        parsed = self._request(text)
        if isinstance(parsed, Fallback):
            return AerialExtraction(provider=_provider(provider_hint))

        data = parsed.value
        complexity = (read_optional_str(data, "roofComplexity") or "unknown").lower()
        return AerialExtraction(
            provider=_provider(read_optional_str(data, "provider") or provider_hint),
            report_id=read_optional_str(data, "reportId"),
            total_area=read_quantity(data, "totalArea"),
            total_perimeter=read_quantity(data, "totalPerimeter"),
            ridge_length=read_quantity(data, "ridgeLength"),
            hip_length=read_quantity(data, "hipLength"),
            valley_length=read_quantity(data, "valleyLength"),
            eave_length=read_quantity(data, "eaveLength"),
            rake_length=read_quantity(data, "rakeLength"),
            slopes=[
                Slope(
                    pitch=read_str(raw, "pitch", "unknown"),
                    area=read_quantity(raw, "area"),
                    percentage=read_quantity(raw, "percentage"),
                )
                for raw in read_list(data, "slopes")
                if isinstance(raw, dict)
            ],
            structures=[
                Structure(
                    name=read_str(raw, "name", "structure"),
                    area=read_quantity(raw, "area"),
                )
                for raw in read_list(data, "structures")
                if isinstance(raw, dict)
            ],
            facet_count=read_count(data, "facetCount"),
            roof_complexity=complexity if complexity in ROOF_COMPLEXITIES else "unknown",
        )
