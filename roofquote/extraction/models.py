from dataclasses import dataclass, field

INSURANCE_DOCUMENT_TYPES = frozenset({"insurance_scope", "supplement"})
DOCUMENT_TYPES = frozenset(
    {"insurance_scope", "supplement", "aerial_report", "photo", "other"}
)
AERIAL_PROVIDERS = frozenset({"eagleview", "roofscope", "hover", "gaf_quickmeasure", "other"})
ROOF_COMPLEXITIES = frozenset({"simple", "moderate", "complex", "very_complex", "unknown"})
UNITS = frozenset({"SQ", "SF", "LF", "EA"})


@dataclass(frozen=True)
class Classification:
    """Document type and carrier/provider subtype."""

    type: str = "other"
    subtype: str | None = None


@dataclass(frozen=True)
class OtherPipeJack:
    description: str
    quantity: int


@dataclass
class PipeJackResult:
    """Pipe jack counts by flashing type.

    `total_count` is always recomputed from the counters and `pf_other`.
    """

    pf3n1: int = 0  # 3-in-1 universal
    pf14: int = 0  # 1-4" unspecified size
    pf14_4: int = 0
    pf14_5: int = 0
    pf14_6: int = 0
    pf14_8: int = 0
    pf_split_boot: int = 0
    pf_lead: int = 0
    pf_goose_neck_small: int = 0  # <= 4"
    pf_goose_neck_large: int = 0  # > 4"
    pf_other: list[OtherPipeJack] = field(default_factory=list)
    total_count: int = 0
    confidence: float = 0.0
    validation_notes: list[str] = field(default_factory=list)


PIPE_JACK_COUNTERS = (
    "pf3n1",
    "pf14",
    "pf14_4",
    "pf14_5",
    "pf14_6",
    "pf14_8",
    "pf_split_boot",
    "pf_lead",
    "pf_goose_neck_small",
    "pf_goose_neck_large",
)


@dataclass(frozen=True)
class OtherVent:
    description: str
    quantity: float
    unit: str = "EA"


@dataclass
class VentResult:
    """Ventilation counts. Ridge vent is linear feet, everything else is each."""

    vs_turtle_vent: float = 0
    vs_ridge_vent: float = 0
    vs_intake_vent: float = 0
    vs_off_ridge_vent: float = 0
    vs_broan4: float = 0
    vs_broan6: float = 0
    vs_power_vent: float = 0
    vs_gable_vent: float = 0
    vs_whirlybird: float = 0
    hvac_vent: float = 0
    vs_other: list[OtherVent] = field(default_factory=list)
    total_exhaust: float = 0
    total_intake: float = 0
    nfa: float = 0
    confidence: float = 0.0
    validation_notes: list[str] = field(default_factory=list)
    is_balanced: bool = False


VENT_COUNTERS = (
    "vs_turtle_vent",
    "vs_ridge_vent",
    "vs_intake_vent",
    "vs_off_ridge_vent",
    "vs_broan4",
    "vs_broan6",
    "vs_power_vent",
    "vs_gable_vent",
    "vs_whirlybird",
    "hvac_vent",
)

EXHAUST_COUNTERS = (
    "vs_turtle_vent",
    "vs_off_ridge_vent",
    "vs_broan4",
    "vs_broan6",
    "vs_power_vent",
    "vs_whirlybird",
)


@dataclass(frozen=True)
class VentilationAssessment:
    is_adequate: bool
    recommendation: str
    required_nfa: float
    deficit: float = 0.0
    suggested_additions: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class HeaderData:
    customer_name: str | None = None
    insurance_company: str | None = None
    policy_number: str | None = None
    claim_number: str | None = None
    date_of_loss: str | None = None
    adjuster_name: str | None = None


@dataclass(frozen=True)
class RoofMeasurements:
    """Scope measurements. `total_area` is in squares, lengths in linear feet."""

    total_area: float | None = None
    perimeter: float | None = None
    ridge: float | None = None
    hip: float | None = None
    valley: float | None = None
    eave: float | None = None
    rake: float | None = None


@dataclass(frozen=True)
class HeaderExtraction:
    data: HeaderData = field(default_factory=HeaderData)
    measurements: RoofMeasurements = field(default_factory=RoofMeasurements)
    confidence: float = 0.5


@dataclass(frozen=True)
class MaterialItem:
    category: str
    description: str
    quantity: float
    unit: str
    subcategory: str | None = None


@dataclass(frozen=True)
class InsuranceLineItem:
    category: str
    description: str
    quantity: float
    unit: str
    rcv: float
    acv: float | None = None
    depreciation: float | None = None
    subcategory: str | None = None


@dataclass(frozen=True)
class FinancialSummary:
    total_rcv: float = 0.0
    total_acv: float = 0.0
    roof_rcv: float | None = None
    roof_acv: float | None = None
    gutter_rcv: float | None = None
    gutter_acv: float | None = None
    deductible: float | None = None


@dataclass(frozen=True)
class MaterialsExtraction:
    materials: list[MaterialItem] = field(default_factory=list)
    financial_summary: FinancialSummary = field(default_factory=FinancialSummary)
    line_items: list[InsuranceLineItem] = field(default_factory=list)
    confidence: float = 0.5


@dataclass(frozen=True)
class ConfidenceScores:
    header: float
    pipe_jacks: float
    ventilation: float
    materials: float
    financial: float
    overall: float


@dataclass(frozen=True)
class InsuranceExtraction:
    header_data: HeaderData
    roof_measurements: RoofMeasurements
    pipe_jacks: PipeJackResult
    ventilation: VentResult
    materials: list[MaterialItem]
    financial_summary: FinancialSummary
    line_items: list[InsuranceLineItem]
    confidence_scores: ConfidenceScores


@dataclass(frozen=True)
class Slope:
    pitch: str
    area: float
    percentage: float


@dataclass(frozen=True)
class Structure:
    name: str
    area: float


@dataclass(frozen=True)
class AerialExtraction:
    """Aerial measurement report. Areas are square feet, lengths linear feet."""

    provider: str = "other"
    report_id: str | None = None
    total_area: float = 0.0
    total_perimeter: float = 0.0
    ridge_length: float = 0.0
    hip_length: float = 0.0
    valley_length: float = 0.0
    eave_length: float = 0.0
    rake_length: float = 0.0
    slopes: list[Slope] = field(default_factory=list)
    structures: list[Structure] = field(default_factory=list)
    facet_count: int = 0
    roof_complexity: str = "unknown"


@dataclass(frozen=True)
class ExtractionHints:
    """Physical reference values used to cross-check extracted counts."""

    roof_area: float | None = None  # square feet
    ridge_length: float | None = None  # linear feet
    structure_count: int | None = None


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
