"""
Product Repository

Reads and writes the ``products`` table and product images, and feeds the
variant grouping engine with normalised records.
"""

import logging
import mimetypes
import uuid
from typing import List, Optional

from ..catalog.normalizer import DEFAULT_SIZE, normalize_product
from ..catalog.variants import get_related_variants, group_for_storefront
from ..common.cache import TTLCache
from ..models import ProductPayload, ProductRecord, StorefrontEntry
from ..supabase import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = 'products'
PRODUCT_BUCKET = 'product-images'
PRODUCTS_CACHE_KEY = 'products'


def image_object_path(folder: str, filename: str) -> str:
    """Random storage path keeping the file extension: ``products/<uuid>.jpg``."""
    extension = filename.rsplit('.', 1)[-1] if '.' in filename else 'jpg'
    return f"{folder}/{uuid.uuid4()}.{extension.lower()}"


class ProductRepository:
    """
    Product persistence on top of SupabaseClient.

    Usage:
        repository = ProductRepository(client, cache=TTLCache(ttl=60))
        entries = repository.list_storefront()
        variants = repository.get_related_variants(product)
    """

    def __init__(
        self,
        client: SupabaseClient,
        cache: Optional[TTLCache] = None,
        default_size: str = DEFAULT_SIZE,
        bucket: str = PRODUCT_BUCKET,
    ):
        """
        Initialize the repository.

        Args:
            client: Supabase client
            cache: Optional cache for list_products(); writes invalidate it
            default_size: Size label for products without sizes
            bucket: Storage bucket for product images
        """
        self.client = client
        self.cache = cache
        self.default_size = default_size
        self.bucket = bucket

    def _fetch_all(self) -> List[ProductRecord]:
        rows = self.client.select(PRODUCTS_TABLE, order=[('created_at', False)])
        logger.debug("Fetched %d product rows", len(rows))
        return [normalize_product(row, self.default_size) for row in rows]

    def list_products(self) -> List[ProductRecord]:
        """All products, newest first."""
        if self.cache is None:
            return self._fetch_all()
        return list(self.cache.get_or_load(PRODUCTS_CACHE_KEY, self._fetch_all))

    def get_product_by_slug(self, slug: str) -> Optional[ProductRecord]:
        row = self.client.select_one(PRODUCTS_TABLE, {'slug': slug})
        if row is None:
            return None
        return normalize_product(row, self.default_size)

    def list_storefront(self) -> List[StorefrontEntry]:
        """Products grouped into storefront tiles."""
        return group_for_storefront(self.list_products())

    def get_related_variants(self, product: ProductRecord) -> List[ProductRecord]:
        """Colour variants of product (product included) for swatch navigation."""
        return get_related_variants(self.list_products(), product)

    def _invalidate(self) -> None:
        if self.cache is not None:
            self.cache.invalidate(PRODUCTS_CACHE_KEY)

    def upsert_product(self, payload: ProductPayload, product_id: Optional[str] = None) -> ProductRecord:
        """
        Insert a new product, or update product_id when given.

        Returns:
            The stored product, normalised

        Raises:
            SupabaseError: On API failure or when product_id matches nothing
        """
        data = payload.to_dict()
        if product_id:
            rows = self.client.update(PRODUCTS_TABLE, data, {'id': product_id})
        else:
            rows = self.client.insert(PRODUCTS_TABLE, data)

        self._invalidate()

        if not rows:
            raise SupabaseError(f"Product not found: {product_id}")

        logger.info("Saved product %s", payload.slug)
        return normalize_product(rows[0], self.default_size)

    def remove_product(self, product_id: str) -> None:
        self.client.delete(PRODUCTS_TABLE, {'id': product_id})
        self._invalidate()
        logger.info("Removed product %s", product_id)

    def upload_product_image(self, filename: str, content: bytes) -> str:
        """
        Upload a product photo.

        Returns:
            Public URL of the uploaded image
        """
        path = image_object_path('products', filename)
        content_type = mimetypes.guess_type(filename)[0] or 'application/octet-stream'
        self.client.upload(self.bucket, path, content, content_type=content_type)
        return self.client.public_url(self.bucket, path)
