"""Scores catalog products against a line item.

Points: +2 same category, +3 same subcategory, +1 for each description word
longer than two characters found in the product name, +5 when the product's
manufacturer SKU appears in the description. Below ``MATCH_THRESHOLD`` the
item is unmatched.
"""

from collections.abc import Iterable

from roofquote.pricing.models import LineItem, Product

CATEGORY_POINTS = 2
SUBCATEGORY_POINTS = 3
NAME_WORD_POINTS = 1
SKU_POINTS = 5
MATCH_THRESHOLD = 3
MIN_WORD_LENGTH = 3


def score_product(item: LineItem, product: Product) -> int:
    description = item.description.lower()
    subcategory = item.subcategory.lower() if item.subcategory else None
    score = 0

    if product.category.lower() == item.category.lower():
        score += CATEGORY_POINTS
    if subcategory and (product.subcategory or "").lower() == subcategory:
        score += SUBCATEGORY_POINTS

    product_name = product.name.lower()
    for word in description.split():
        if len(word) >= MIN_WORD_LENGTH and word in product_name:
            score += NAME_WORD_POINTS

    if product.manufacturer_sku and product.manufacturer_sku.lower() in description:
        score += SKU_POINTS
    return score


def find_best_product_match(item: LineItem, products: Iterable[Product]) -> Product | None:
    """Highest scoring product, first one wins ties; None below the threshold."""
    best_match: Product | None = None
    best_score = 0
    for product in products:
        score = score_product(item, product)
        if score > best_score:
            best_score = score
            best_match = product
    return best_match if best_score >= MATCH_THRESHOLD else None
