"""
Product Row Normalizer

Converts raw ``products`` table rows into ProductRecord instances.
This is the single place where loosely typed backend data is coerced;
downstream code (grouping, cart, checkout) trusts the record types.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models import EPOCH, ProductRecord

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 'Taille unique'

# Stock assumed for rows that carry neither a count nor an out-of-stock flag
UNTRACKED_STOCK = 999


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a backend timestamp into a UTC-aware datetime.

    Accepts datetimes and ISO-8601 strings (including a trailing ``Z``).
    Naive values are assumed to be UTC; anything unparsable becomes the
    epoch so it sorts last.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            logger.warning("Unparsable timestamp: %r", value)
            return EPOCH
    else:
        return EPOCH

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_sizes(raw_sizes: Any, default_size: str = DEFAULT_SIZE) -> List[str]:
    """
    Trim, drop blanks and deduplicate size labels.

    Returns:
        Sizes in first-seen order, or [default_size] when none remain
    """
    if not isinstance(raw_sizes, list):
        raw_sizes = []

    sizes = []
    for size in raw_sizes:
        if not isinstance(size, str):
            continue
        size = size.strip()
        if size and size not in sizes:
            sizes.append(size)

    return sizes or [default_size]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_number(value: Any) -> Optional[float]:
    return value if _is_number(value) else None


def normalize_product(row: Dict[str, Any], default_size: str = DEFAULT_SIZE) -> ProductRecord:
    """
    Build a ProductRecord from a raw table row.

    Rules:
    - sizes: coerced to a trimmed, deduplicated list (default size if empty)
    - gallery_urls: non-list values become []
    - is_out_of_stock: kept when boolean, otherwise derived from stock <= 0
    - stock: kept when numeric, otherwise 0 if flagged out of stock, else 999

    Args:
        row: Row dict as returned by the REST API
        default_size: Label used when a product has no sizes

    Returns:
        Normalised ProductRecord
    """
    raw_stock = row.get('stock')
    raw_flag = row.get('is_out_of_stock')
    stock_is_number = _is_number(raw_stock)

    if isinstance(raw_flag, bool):
        is_out_of_stock = raw_flag
    else:
        is_out_of_stock = raw_stock <= 0 if stock_is_number else False

    if stock_is_number:
        stock = int(raw_stock)
    else:
        stock = 0 if raw_flag else UNTRACKED_STOCK

    gallery = row.get('gallery_urls')

    return ProductRecord(
        id=str(row.get('id', '')),
        slug=row.get('slug') or '',
        name=row.get('name'),
        main_category=row.get('main_category') or '',
        sub_category=row.get('sub_category') or '',
        image_url=row.get('image_url') or None,
        gallery_urls=[url for url in gallery if isinstance(url, str)] if isinstance(gallery, list) else [],
        sizes=normalize_sizes(row.get('sizes'), default_size),
        is_out_of_stock=is_out_of_stock,
        stock=stock,
        is_new=bool(row.get('is_new')),
        is_best_seller=bool(row.get('is_best_seller')),
        description=row.get('description') or '',
        price=row.get('price') if _is_number(row.get('price')) else 0,
        compare_price=_optional_number(row.get('compare_price')),
        created_at=parse_timestamp(row.get('created_at')),
        updated_at=parse_timestamp(row.get('updated_at')),
    )


def product_to_row(product: ProductRecord) -> Dict[str, Any]:
    """Serialise a record back to a JSON-compatible row (cart persistence)."""
    return {
        'id': product.id,
        'slug': product.slug,
        'name': product.name,
        'description': product.description,
        'price': product.price,
        'compare_price': product.compare_price,
        'stock': product.stock,
        'main_category': product.main_category,
        'sub_category': product.sub_category,
        'image_url': product.image_url,
        'gallery_urls': list(product.gallery_urls),
        'sizes': list(product.sizes),
        'is_out_of_stock': product.is_out_of_stock,
        'is_new': product.is_new,
        'is_best_seller': product.is_best_seller,
        'created_at': product.created_at.isoformat(),
        'updated_at': product.updated_at.isoformat(),
    }
