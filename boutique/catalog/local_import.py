"""
Local Product Import

Builds seed products from a folder of product photos. Photos sharing a
base file name (``robe-soir.jpg``, ``robe-soir 2.jpg``) become one
product whose first photo is the main image and the rest its gallery.
The result is written as SQL for the ``products`` table.
"""

import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from ..common.config_loader import load_catalog_settings
from ..common.transliteration import normalize_key, slugify, title_case
from .variants import collation_key

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png'}


@dataclass
class LocalProduct:
    """Seed product built from local photos."""
    name: str
    slug: str
    main_category: str
    sub_category: str
    description: str
    price: int
    stock: int
    image_url: Optional[str] = None
    gallery_urls: List[str] = field(default_factory=list)
    compare_price: Optional[int] = None
    is_new: bool = False
    is_best_seller: bool = False


@dataclass
class _PhotoGroup:
    key: str
    display_name: Optional[str] = None
    clean_base: str = ''
    files: List[Path] = field(default_factory=list)


def strip_trailing_number(value: str) -> str:
    """Remove a trailing copy number: ``"Robe Soir-2"`` -> ``"Robe Soir"``."""
    return re.sub(r'\s*[-_]?\d+\s*$', '', value).strip()


def categorize(name: str, rules: List[Dict[str, Any]], default: Tuple[str, str]) -> Tuple[str, str]:
    """
    Pick (main_category, sub_category) from keyword rules.

    Rules are checked in order; the first one with a keyword contained in
    the lower-cased name wins.
    """
    lower = name.lower()
    for rule in rules:
        if any(keyword in lower for keyword in rule.get('keywords', [])):
            return rule['main'], rule['sub']
    return default


def unique_slug(slug: str, used: Set[str]) -> str:
    """Suffix slug with -2, -3, ... until it is not in used, then record it."""
    candidate = slug
    index = 2
    while candidate in used:
        candidate = f"{slug}-{index}"
        index += 1
    used.add(candidate)
    return candidate


def group_photos(image_dir: Path) -> List[_PhotoGroup]:
    """Group image files of a directory by normalised base name."""
    groups: Dict[str, _PhotoGroup] = {}

    for path in sorted(image_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
            continue

        base_name = path.stem.strip()
        clean_base = strip_trailing_number(base_name)
        key = normalize_key(clean_base or base_name)
        if not key:
            logger.debug("Skipping %s: empty name", path.name)
            continue

        group = groups.setdefault(key, _PhotoGroup(key=key, clean_base=clean_base))
        if not group.display_name and base_name == clean_base:
            group.display_name = clean_base
        group.files.append(path)

    return list(groups.values())


def build_local_products(
    image_dir: Path,
    public_dir: Optional[Path] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> List[LocalProduct]:
    """
    Build seed products from the photos in image_dir.

    Args:
        image_dir: Folder containing .jpg/.jpeg/.png photos
        public_dir: When set, photos are copied to public_dir/products
            as ``<slug>-NN.<ext>``
        settings: The 'local_import' section of catalog.yaml (loaded if None)

    Returns:
        Products sorted by name
    """
    if settings is None:
        settings = load_catalog_settings().get('local_import', {})

    default_category = (
        settings.get('default_main_category', ''),
        settings.get('default_sub_category', ''),
    )
    rules = settings.get('rules', [])

    target_dir = None
    if public_dir is not None:
        target_dir = public_dir / 'products'
        target_dir.mkdir(parents=True, exist_ok=True)

    used_slugs: Set[str] = set()
    products = []

    for group in group_photos(image_dir):
        group.files.sort(key=lambda path: collation_key(path.name))

        display_name = group.display_name or title_case(group.clean_base or group.key)
        slug = unique_slug(slugify(display_name) or slugify(group.key), used_slugs)

        images = []
        for index, path in enumerate(group.files, start=1):
            extension = path.suffix.lower() or '.jpeg'
            target_name = f"{slug}-{index:02d}{extension}"
            if target_dir is not None:
                shutil.copyfile(path, target_dir / target_name)
            images.append(f"/products/{target_name}")

        main_category, sub_category = categorize(display_name, rules, default_category)

        products.append(LocalProduct(
            name=display_name,
            slug=slug,
            main_category=main_category,
            sub_category=sub_category,
            description=settings.get('default_description', ''),
            price=settings.get('default_price', 0),
            stock=settings.get('default_stock', 0),
            image_url=images[0] if images else None,
            gallery_urls=images[1:],
        ))

    logger.info("Built %d products from %s", len(products), image_dir)
    return sorted(products, key=lambda product: collation_key(product.name))


def _sql_string(value: Optional[str]) -> str:
    if value is None:
        return 'null'
    return "'" + value.replace("'", "''") + "'"


def _sql_value(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def build_seed_sql(products: List[LocalProduct]) -> str:
    """
    Render an INSERT statement for the products table.

    Existing slugs are left untouched (``on conflict (slug) do nothing``).
    """
    columns = [
        'name', 'slug', 'description', 'price', 'compare_price', 'stock',
        'main_category', 'sub_category', 'image_url', 'gallery_urls',
        'is_new', 'is_best_seller',
    ]

    rows = []
    for product in products:
        if product.gallery_urls:
            gallery = 'array[' + ', '.join(_sql_string(url) for url in product.gallery_urls) + ']'
        else:
            gallery = 'array[]::text[]'

        values = [
            _sql_string(product.name),
            _sql_string(product.slug),
            _sql_string(product.description),
            _sql_value(product.price),
            _sql_value(product.compare_price),
            _sql_value(product.stock),
            _sql_string(product.main_category),
            _sql_string(product.sub_category),
            _sql_string(product.image_url),
            gallery,
            _sql_value(product.is_new),
            _sql_value(product.is_best_seller),
        ]
        rows.append('  (\n    ' + ',\n    '.join(values) + '\n  )')

    if not rows:
        return ''

    column_list = ',\n  '.join(columns)
    row_list = ',\n'.join(rows)
    return (
        f"insert into public.products (\n  {column_list}\n)\n"
        f"values\n{row_list}\n"
        "on conflict (slug) do nothing;\n"
    )
