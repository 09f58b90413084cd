from dataclasses import dataclass, field

SUPPLIERS = ("beacon", "srs", "abc", "gulf_eagle")
LABOR_SUPPLIER = "labor"
LOWEST_PRICE = "lowest"


@dataclass(frozen=True)
class LineItem:
    """A job line item as stored, the input to pricing."""

    id: str
    category: str
    description: str
    quantity: float
    unit: str
    rcv: float | None = None
    subcategory: str | None = None


@dataclass(frozen=True)
class Product:
    """An active catalog product with per-supplier prices and SKUs."""

    id: str
    name: str
    category: str
    subcategory: str | None = None
    manufacturer_sku: str | None = None
    beacon_price: float | None = None
    beacon_sku: str | None = None
    srs_price: float | None = None
    srs_sku: str | None = None
    abc_price: float | None = None
    abc_sku: str | None = None
    gulf_eagle_price: float | None = None
    gulf_eagle_sku: str | None = None

    def supplier_price(self, supplier: str) -> float | None:
        return getattr(self, f"{supplier}_price")

    def supplier_sku(self, supplier: str) -> str | None:
        return getattr(self, f"{supplier}_sku")


@dataclass(frozen=True)
class SupplierQuote:
    supplier: str
    unit_price: float
    sku: str | None = None


@dataclass(frozen=True)
class PricedItem:
    id: str
    category: str
    description: str
    quantity: float
    unit: str
    rcv: float | None
    matched: bool
    product_id: str | None = None
    product_name: str | None = None
    unit_price: float | None = None
    total_price: float | None = None
    supplier: str | None = None
    sku: str | None = None


@dataclass(frozen=True)
class SupplierTotal:
    count: int
    total: float


@dataclass(frozen=True)
class EstimateResult:
    items: list[PricedItem]
    total_material_cost: float
    total_labor_cost: float
    profit: float
    primary_supplier: str
    supplier_breakdown: dict[str, SupplierTotal] = field(default_factory=dict)


@dataclass(frozen=True)
class EstimateOptions:
    """Pricing knobs.

    ``material_markup`` is carried for callers but not applied to costs.
    ``overhead`` is applied by the estimate service, not the calculator.
    """

    preferred_supplier: str = LOWEST_PRICE
    labor_markup: float = 0.35
    material_markup: float = 0.25
    overhead: float = 0.1


@dataclass(frozen=True)
class MaterialQuantity:
    quantity: int
    unit: str
