"""
Variant Grouping

Collapses colour variants of the same product into single storefront
tiles. Variants share a naming convention, ``"<base> - <colour>"``, and
are grouped by base name within the same category placement.

Every function here is pure: inputs are never mutated and a new list is
returned on each call.
"""

from dataclasses import fields
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..common.transliteration import strip_accents
from ..models import ProductRecord, StorefrontEntry, VariantMeta

VARIANT_SEPARATOR = ' - '

GroupKey = Tuple[str, str, str]


def _dedupe_key(product: ProductRecord) -> str:
    return product.slug or product.id


def _unique(values: Iterable[str]) -> List[str]:
    """Drop empty values and duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if not value or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def dedupe_by_slug(products: Sequence[ProductRecord]) -> List[ProductRecord]:
    """
    Keep the first occurrence of each product.

    Products are keyed by slug, falling back to id when the slug is empty.

    Args:
        products: Raw product list, possibly with repeated rows

    Returns:
        New list in original order with later duplicates dropped
    """
    seen = set()
    unique = []

    for product in products:
        key = _dedupe_key(product)
        if key in seen:
            continue
        seen.add(key)
        unique.append(product)

    return unique


def get_variant_meta(product: Union[ProductRecord, str, None]) -> VariantMeta:
    """
    Split a product name into base name and colour.

    The colour is the segment after the last ``" - "``; everything before
    it is the base name. Names without a usable separator are colourless.

    Args:
        product: ProductRecord or raw name (None is treated as empty)

    Returns:
        VariantMeta(base_name, color)

    Example:
        >>> get_variant_meta("Robe Soir - Rouge")
        VariantMeta(base_name='Robe Soir', color='Rouge')
        >>> get_variant_meta("Midi Dress - Long - Black")
        VariantMeta(base_name='Midi Dress - Long', color='Black')
    """
    name = product.name if isinstance(product, ProductRecord) else product
    name = name or ''
    colorless = VariantMeta(base_name=name.strip(), color=None)

    if VARIANT_SEPARATOR not in name:
        return colorless

    parts = [part.strip() for part in name.split(VARIANT_SEPARATOR)]
    if len(parts) < 2:
        return colorless

    color = parts.pop()
    base_name = VARIANT_SEPARATOR.join(parts).strip()

    if not base_name or not color:
        return colorless

    return VariantMeta(base_name=base_name, color=color)


def get_group_key(product: ProductRecord) -> GroupKey:
    """Grouping identity: lower-cased base name plus category placement.

    Category names are compared exactly, not case-folded.
    """
    meta = get_variant_meta(product)
    return (meta.base_name.lower(), product.main_category, product.sub_category)


def _merge_group(group: List[ProductRecord]) -> StorefrontEntry:
    primary = group[0]
    values = {f.name: getattr(primary, f.name) for f in fields(ProductRecord)}

    images = _unique(
        url
        for item in group
        for url in [item.image_url, *(item.gallery_urls or [])]
    )
    sizes = _unique(
        size.strip()
        for item in group
        for size in (item.sizes or [])
    )

    values.update(
        name=get_variant_meta(primary).base_name,
        image_url=images[0] if images else primary.image_url,
        gallery_urls=images[1:],
        sizes=sizes,
        is_out_of_stock=all(item.is_out_of_stock for item in group),
        stock=sum(item.stock for item in group),
        is_new=any(item.is_new for item in group),
        is_best_seller=any(item.is_best_seller for item in group),
    )
    return StorefrontEntry(**values, variant_slugs=[_dedupe_key(item) for item in group])


def group_for_storefront(products: Sequence[ProductRecord]) -> List[StorefrontEntry]:
    """
    Merge colour variants into one storefront entry per group.

    Products are deduplicated, ordered newest first (stable on ties) and
    grouped by base name and category. The newest member of each group
    provides the scalar fields; images, sizes, stock and merchandising
    flags are aggregated over the whole group.

    Args:
        products: Normalised product records

    Returns:
        One StorefrontEntry per group, in first-seen order of the
        newest-first sequence
    """
    ordered = sorted(
        dedupe_by_slug(products),
        key=lambda product: product.created_at,
        reverse=True,
    )

    groups = {}
    for product in ordered:
        groups.setdefault(get_group_key(product), []).append(product)

    return [_merge_group(group) for group in groups.values()]


def collation_key(value: Optional[str]) -> Tuple[str, str, str]:
    """
    Sort key approximating locale-aware ordering.

    Compares accent- and case-insensitively first, then without accents,
    then exactly, so "écharpe" sorts next to "echarpe" rather than after "z".
    """
    value = value or ''
    folded = strip_accents(value)
    return (folded.casefold(), folded, value)


def get_related_variants(
    products: Sequence[ProductRecord],
    target: ProductRecord,
) -> List[ProductRecord]:
    """
    Find every variant in the same group as target, target included.

    Out-of-stock variants are kept so they remain selectable.

    Args:
        products: Full product list
        target: Product shown on the detail page

    Returns:
        Deduplicated group members sorted by name
    """
    target_key = get_group_key(target)

    related = [
        product for product in dedupe_by_slug(products)
        if get_group_key(product) == target_key
    ]
    return sorted(related, key=lambda product: collation_key(product.name))
