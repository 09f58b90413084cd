from typing import Any

from psycopg.rows import dict_row

from roofquote.database.connection import get_connection
from roofquote.pricing.models import Product


def _price(value: Any) -> float | None:
    return float(value) if value is not None else None


class CatalogRepository:
    """Read-only access to the product catalog and supplier configuration."""

    def list_active_products(self) -> list[Product]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, name, category, subcategory, manufacturer_sku,
                           beacon_price, beacon_sku, srs_price, srs_sku,
                           abc_price, abc_sku, gulf_eagle_price, gulf_eagle_sku
                    FROM product_catalog
                    WHERE is_active
                    ORDER BY id
                    """
                )
                rows = cur.fetchall()

        return [
            Product(
                id=str(row["id"]),
                name=row["name"],
                category=row["category"],
                subcategory=row["subcategory"],
                manufacturer_sku=row["manufacturer_sku"],
                beacon_price=_price(row["beacon_price"]),
                beacon_sku=row["beacon_sku"],
                srs_price=_price(row["srs_price"]),
                srs_sku=row["srs_sku"],
                abc_price=_price(row["abc_price"]),
                abc_sku=row["abc_sku"],
                gulf_eagle_price=_price(row["gulf_eagle_price"]),
                gulf_eagle_sku=row["gulf_eagle_sku"],
            )
            for row in rows
        ]

    def list_enabled_suppliers(self, organization_id: str) -> set[str]:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT supplier
                    FROM supplier_configurations
                    WHERE organization_id = %s AND is_enabled
                    """,
                    (organization_id,),
                )
                rows = cur.fetchall()
        return {row[0] for row in rows}
