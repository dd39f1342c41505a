"""
Catalogue logic.

Modules:
    variants     - Variant parsing, deduplication, storefront grouping, related variants
    normalizer   - Raw table row -> ProductRecord coercion
    sections     - Home page rails, category filters and quick search
    local_import - Seed products from a folder of photos
"""

from .normalizer import DEFAULT_SIZE, normalize_product, parse_timestamp, product_to_row
from .sections import (
    build_home_sections,
    count_by_main_category,
    filter_by_category,
    search_entries,
)
from .variants import (
    VARIANT_SEPARATOR,
    dedupe_by_slug,
    get_group_key,
    get_related_variants,
    get_variant_meta,
    group_for_storefront,
)

__all__ = [
    'DEFAULT_SIZE',
    'VARIANT_SEPARATOR',
    'build_home_sections',
    'count_by_main_category',
    'dedupe_by_slug',
    'filter_by_category',
    'get_group_key',
    'get_related_variants',
    'get_variant_meta',
    'group_for_storefront',
    'normalize_product',
    'parse_timestamp',
    'product_to_row',
    'search_entries',
]
