from collections.abc import Iterable

from roofquote.database.repositories.catalog_repository import CatalogRepository
from roofquote.logging.logger import Log
from roofquote.pricing.matcher import find_best_product_match
from roofquote.pricing.models import (
    LABOR_SUPPLIER,
    LOWEST_PRICE,
    SUPPLIERS,
    EstimateOptions,
    EstimateResult,
    LineItem,
    PricedItem,
    Product,
    SupplierQuote,
    SupplierTotal,
)

LABOR_KEYWORDS = (
    "labor",
    "install",
    "remove",
    "tear",
    "r&r",
    "replace",
    "repair",
    "detach",
    "reset",
)
LABOR_UNITS = frozenset({"hr", "hour", "man-hour"})
LABOR_CATEGORY = "labor"
UNMATCHED_COST_RATIO = 0.6


def is_labor_item(item: LineItem) -> bool:
    description = item.description.lower()
    if any(keyword in description for keyword in LABOR_KEYWORDS):
        return True
    if item.unit.lower() in LABOR_UNITS:
        return True
    return item.category.lower() == LABOR_CATEGORY


def select_price(
    product: Product, preferred_supplier: str, enabled_suppliers: set[str]
) -> SupplierQuote | None:
    """Preferred supplier when it can sell the product, else the cheapest one.

    Only suppliers enabled for the organization and carrying a price count.
    """
    candidates = []
    for supplier in SUPPLIERS:
        price = product.supplier_price(supplier)
        if price is None or supplier not in enabled_suppliers:
            continue
        candidates.append(SupplierQuote(supplier, price, product.supplier_sku(supplier) or None))

    if not candidates:
        return None
    if preferred_supplier and preferred_supplier != LOWEST_PRICE:
        for quote in candidates:
            if quote.supplier == preferred_supplier:
                return quote
    return min(candidates, key=lambda quote: quote.unit_price)


def _rcv(item: LineItem) -> float:
    return item.rcv or 0.0


def price_material(
    item: LineItem,
    products: list[Product],
    preferred_supplier: str,
    enabled_suppliers: set[str],
) -> PricedItem:
    product = find_best_product_match(item, products)
    if product is None:
        return PricedItem(
            id=item.id,
            category=item.category,
            description=item.description,
            quantity=item.quantity,
            unit=item.unit,
            rcv=item.rcv,
            matched=False,
            total_price=_rcv(item) * UNMATCHED_COST_RATIO,
        )

    quote = select_price(product, preferred_supplier, enabled_suppliers)
    return PricedItem(
        id=item.id,
        category=item.category,
        description=item.description,
        quantity=item.quantity,
        unit=item.unit,
        rcv=item.rcv,
        matched=True,
        product_id=product.id,
        product_name=product.name,
        unit_price=quote.unit_price if quote else None,
        total_price=quote.unit_price * item.quantity if quote else None,
        supplier=quote.supplier if quote else None,
        sku=quote.sku if quote else None,
    )


def price_labor(item: LineItem, labor_markup: float) -> PricedItem:
    """RCV includes the markup; back it out to get the cost."""
    cost = _rcv(item) * (1 - labor_markup)
    return PricedItem(
        id=item.id,
        category=item.category,
        description=item.description,
        quantity=item.quantity,
        unit=item.unit,
        rcv=_rcv(item),
        matched=True,
        unit_price=cost,
        total_price=cost,
        supplier=LABOR_SUPPLIER,
    )


def supplier_breakdown(items: Iterable[PricedItem]) -> dict[str, SupplierTotal]:
    totals: dict[str, SupplierTotal] = {}
    for item in items:
        if not item.supplier:
            continue
        current = totals.get(item.supplier, SupplierTotal(count=0, total=0.0))
        totals[item.supplier] = SupplierTotal(
            count=current.count + 1,
            total=current.total + (item.total_price or 0.0),
        )
    return totals


def primary_supplier(breakdown: dict[str, SupplierTotal]) -> str:
    if not breakdown:
        return "none"
    return max(breakdown, key=lambda supplier: breakdown[supplier].total)


class PricingCalculator:
    """Prices job line items against the catalog and computes profit.

    The catalog and the organization's suppliers are read once per call and
    treated as a snapshot.
    """

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def calculate_estimate(
        self,
        line_items: list[LineItem],
        organization_id: str,
        options: EstimateOptions | None = None,
    ) -> EstimateResult:
        options = options or EstimateOptions()
        material_items = [item for item in line_items if not is_labor_item(item)]
        labor_items = [item for item in line_items if is_labor_item(item)]

        priced_materials: list[PricedItem] = []
        if material_items:
            products = self._catalog_repo.list_active_products()
            enabled_suppliers = self._catalog_repo.list_enabled_suppliers(organization_id)
            priced_materials = [
                price_material(item, products, options.preferred_supplier, enabled_suppliers)
                for item in material_items
            ]
        priced_labor = [price_labor(item, options.labor_markup) for item in labor_items]

        total_material_cost = sum(item.total_price or 0.0 for item in priced_materials)
        total_labor_cost = sum(item.total_price or 0.0 for item in priced_labor)
        total_rcv = sum(_rcv(item) for item in line_items)
        breakdown = supplier_breakdown([*priced_materials, *priced_labor])

        result = EstimateResult(
            items=[*priced_materials, *priced_labor],
            total_material_cost=total_material_cost,
            total_labor_cost=total_labor_cost,
            profit=total_rcv - (total_material_cost + total_labor_cost),
            primary_supplier=primary_supplier(breakdown),
            supplier_breakdown=breakdown,
        )
        Log.info(
            f"Priced {len(line_items)} line items for organization {organization_id}: "
            f"materials={total_material_cost:.2f} labor={total_labor_cost:.2f} "
            f"profit={result.profit:.2f}"
        )
        return result
