"""
Storefront Sections

Selection helpers for the home page rails, category counters,
category filtering and quick search over grouped storefront entries.
"""

import math
from collections import Counter
from typing import Dict, List, Optional, Sequence, Set

from ..common.transliteration import strip_accents
from ..models import ProductRecord

MAX_SECTION_SIZE = 8


def _key(product: ProductRecord) -> str:
    return product.slug or product.id


def newest_first(products: Sequence[ProductRecord]) -> List[ProductRecord]:
    return sorted(products, key=lambda product: product.created_at, reverse=True)


def section_size(total: int) -> int:
    """Items per home rail: a third of the catalogue, between 1 and 8."""
    return max(1, min(MAX_SECTION_SIZE, math.ceil(max(total, 1) / 3)))


def _pick_unique(
    source: Sequence[ProductRecord],
    count: int,
    used: Set[str],
    fallback: Optional[Sequence[ProductRecord]] = None,
) -> List[ProductRecord]:
    selected = []
    for pool in (source, fallback or []):
        for product in pool:
            if len(selected) == count:
                return selected
            key = _key(product)
            if key in used:
                continue
            used.add(key)
            selected.append(product)
    return selected


def build_home_sections(products: Sequence[ProductRecord]) -> Dict[str, List[ProductRecord]]:
    """
    Fill the three home page rails without repeating a product.

    The soft collection takes the newest products. "New in" and
    "favorites" take flagged products first and are topped up with
    the newest remaining products when there are not enough flagged ones.

    Returns:
        {'soft_collection': [...], 'new_in': [...], 'favorites': [...]}
    """
    ordered = newest_first(products)
    size = section_size(len(ordered))
    used: Set[str] = set()

    soft_collection = _pick_unique(ordered, size, used)
    new_in = _pick_unique(
        [product for product in ordered if product.is_new], size, used, fallback=ordered,
    )
    favorites = _pick_unique(
        [product for product in ordered if product.is_best_seller], size, used, fallback=ordered,
    )

    return {
        'soft_collection': soft_collection,
        'new_in': new_in,
        'favorites': favorites,
    }


def count_by_main_category(products: Sequence[ProductRecord]) -> Dict[str, int]:
    return dict(Counter(product.main_category for product in products))


def filter_by_category(
    products: Sequence[ProductRecord],
    main_category: Optional[str] = None,
    sub_category: Optional[str] = None,
) -> List[ProductRecord]:
    """Keep products in the given category (and subcategory when set)."""
    return [
        product for product in products
        if (not main_category or product.main_category == main_category)
        and (not sub_category or product.sub_category == sub_category)
    ]


def _fold(text: Optional[str]) -> str:
    return strip_accents(text or '').casefold()


def search_entries(products: Sequence[ProductRecord], term: str) -> List[ProductRecord]:
    """
    Quick search on name and categories, ignoring case and accents.

    Every word of the term must appear in the product's searchable text.
    A blank term returns all products.
    """
    words = _fold(term).split()
    if not words:
        return list(products)

    results = []
    for product in products:
        haystack = ' '.join(
            _fold(value) for value in (product.name, product.main_category, product.sub_category)
        )
        if all(word in haystack for word in words):
            results.append(product)
    return results
