from roofquote.extraction.aerial_extractor import AerialExtractor
from roofquote.extraction.models import AerialExtraction, Slope, Structure


class TestAerialExtractor:
    def test_extracts_report(self, capability_returning) -> None:
        capability, _client = capability_returning(
            {
                "provider": "EagleView",
                "reportId": "EV-991",
                "totalArea": 2450,
                "ridgeLength": 48,
                "slopes": [{"pitch": "6/12", "area": 2000, "percentage": 81.6}],
                "structures": [{"name": "House", "area": 2100}, {"name": "Garage", "area": 350}],
                "facetCount": 12,
                "roofComplexity": "Moderate",
            }
        )
        result = AerialExtractor(capability).extract("report")

        assert result.provider == "eagleview"
        assert result.report_id == "EV-991"
        assert result.total_area == 2450.0
        assert result.ridge_length == 48.0
        assert result.hip_length == 0.0
        assert result.slopes == [Slope(pitch="6/12", area=2000.0, percentage=81.6)]
        assert result.structures[1] == Structure(name="Garage", area=350.0)
        assert result.facet_count == 12
        assert result.roof_complexity == "moderate"

    def test_unknown_values_are_normalized(self, capability_returning) -> None:
        capability, _client = capability_returning(
            {"provider": "SkyMeasure", "roofComplexity": "insane", "totalArea": -5}
        )
        result = AerialExtractor(capability).extract("report")

        assert result.provider == "other"
        assert result.roof_complexity == "unknown"
        assert result.total_area == 0.0

    def test_provider_hint_used_when_response_has_none(self, capability_returning) -> None:
        capability, _client = capability_returning({"totalArea": 1800})
        assert AerialExtractor(capability).extract("report", "hover").provider == "hover"

    def test_fallback_keeps_hinted_provider(self, capability_returning) -> None:
        capability, _client = capability_returning("unreadable")
        result = AerialExtractor(capability).extract("report", "roofscope")
        assert result == AerialExtraction(provider="roofscope", roof_complexity="unknown")

    def test_fallback_without_hint(self, capability_returning) -> None:
        capability, _client = capability_returning("unreadable")
        assert AerialExtractor(capability).extract("report").provider == "other"
