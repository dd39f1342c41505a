"""
Product data models.

Pure data classes for representing catalogue products as they leave the
repository boundary, and the merged entries shown on the storefront.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class VariantMeta:
    """Base name and colour parsed from a product name."""
    base_name: str
    color: Optional[str] = None


@dataclass(frozen=True)
class ProductRecord:
    """
    One catalogue row (a physical stock-keeping unit).

    Records are normalised once by the repository (see
    boutique.catalog.normalizer) and then treated as immutable.

    Field Groups:
    - Identity: id, slug, name
    - Classification: main_category, sub_category
    - Media: image_url, gallery_urls
    - Options and stock: sizes, is_out_of_stock, stock
    - Merchandising: is_new, is_best_seller
    - Pricing and copy: description, price, compare_price
    - Timestamps: created_at, updated_at (UTC aware)
    """

    # Identity
    id: str
    slug: str
    name: Optional[str]

    # Classification
    main_category: str = ""
    sub_category: str = ""

    # Media
    image_url: Optional[str] = None
    gallery_urls: List[str] = field(default_factory=list)

    # Options and stock
    sizes: List[str] = field(default_factory=list)
    is_out_of_stock: bool = False
    stock: int = 0

    # Merchandising flags
    is_new: bool = False
    is_best_seller: bool = False

    # Pricing and copy
    description: str = ""
    price: float = 0
    compare_price: Optional[float] = None

    # Timestamps
    created_at: datetime = EPOCH
    updated_at: datetime = EPOCH


@dataclass(frozen=True)
class StorefrontEntry(ProductRecord):
    """
    Merged, display-ready product for one variant group.

    Scalar fields come from the group's most recently created record;
    media, sizes, stock and flags are aggregated over the whole group.
    variant_slugs lists the dedup keys of every member in group order.
    """
    variant_slugs: List[str] = field(default_factory=list)


@dataclass
class ProductPayload:
    """Writable product columns sent on insert/update."""
    name: str
    slug: str
    main_category: str
    sub_category: str
    description: str = ""
    price: float = 0
    compare_price: Optional[float] = None
    stock: int = 0
    image_url: Optional[str] = None
    gallery_urls: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    is_out_of_stock: bool = False
    is_new: bool = False
    is_best_seller: bool = False

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("Product name is required")
        if not self.slug or not self.slug.strip():
            raise ValueError("Product slug is required")
        if self.stock < 0:
            raise ValueError("Product stock cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name.strip(),
            'slug': self.slug.strip(),
            'description': self.description,
            'price': self.price,
            'compare_price': self.compare_price,
            'stock': self.stock,
            'main_category': self.main_category,
            'sub_category': self.sub_category,
            'image_url': self.image_url,
            'gallery_urls': list(self.gallery_urls),
            'sizes': list(self.sizes),
            'is_out_of_stock': self.is_out_of_stock,
            'is_new': self.is_new,
            'is_best_seller': self.is_best_seller,
        }
