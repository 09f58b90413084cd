from typing import Any

from roofquote.extraction.base import SchemaExtractor
from roofquote.extraction.coercion import (
    normalize_unit,
    read_amount,
    read_confidence,
    read_list,
    read_object,
    read_optional_amount,
    read_optional_str,
    read_quantity,
    read_str,
)
from roofquote.extraction.json_parser import Fallback
from roofquote.extraction.models import (
    FinancialSummary,
    InsuranceLineItem,
    MaterialItem,
    MaterialsExtraction,
)

FALLBACK_CONFIDENCE = 0.5
PARSED_DEFAULT_CONFIDENCE = 0.8


def build_material(raw: dict[str, Any]) -> MaterialItem | None:
    description = read_str(raw, "description")
    if not description:
        return None
    subcategory = read_optional_str(raw, "subcategory")
    return MaterialItem(
        category=read_str(raw, "category", "other").lower(),
        subcategory=subcategory.lower() if subcategory else None,
        description=description,
        quantity=read_quantity(raw, "quantity"),
        unit=normalize_unit(read_str(raw, "unit", "EA")),
    )


def build_line_item(raw: dict[str, Any]) -> InsuranceLineItem | None:
    description = read_str(raw, "description")
    if not description:
        return None
    subcategory = read_optional_str(raw, "subcategory")
    return InsuranceLineItem(
        category=read_str(raw, "category", "other").lower(),
        subcategory=subcategory.lower() if subcategory else None,
        description=description,
        quantity=read_quantity(raw, "quantity"),
        unit=normalize_unit(read_str(raw, "unit", "EA")),
        rcv=read_amount(raw, "rcv"),
        acv=read_optional_amount(raw, "acv"),
        depreciation=read_optional_amount(raw, "depreciation"),
    )


def build_financial_summary(raw: dict[str, Any]) -> FinancialSummary:
    return FinancialSummary(
        total_rcv=read_amount(raw, "totalRCV"),
        total_acv=read_amount(raw, "totalACV"),
        roof_rcv=read_optional_amount(raw, "roofRCV"),
        roof_acv=read_optional_amount(raw, "roofACV"),
        gutter_rcv=read_optional_amount(raw, "gutterRCV"),
        gutter_acv=read_optional_amount(raw, "gutterACV"),
        deductible=read_optional_amount(raw, "deductible"),
    )


class MaterialsExtractor(SchemaExtractor):
    """Materials list, financial summary and priced line items.

    Gets the full text: line items run to the end of the scope.
    """

    PROMPT_NAME = "materials"
    MAX_TOKENS = 4096

    def extract(self, text: str) -> MaterialsExtraction:
        parsed = self._request(text)
        if isinstance(parsed, Fallback):
            return MaterialsExtraction(confidence=FALLBACK_CONFIDENCE)

        materials = [
            build_material(raw)
            for raw in read_list(parsed.value, "materials")
            if isinstance(raw, dict)
        ]
        line_items = [
            build_line_item(raw)
            for raw in read_list(parsed.value, "lineItems")
            if isinstance(raw, dict)
        ]
        return MaterialsExtraction(
            materials=[m for m in materials if m is not None],
            financial_summary=build_financial_summary(
                read_object(parsed.value, "financialSummary")
            ),
            line_items=[i for i in line_items if i is not None],
            confidence=read_confidence(parsed.value, PARSED_DEFAULT_CONFIDENCE),
        )
