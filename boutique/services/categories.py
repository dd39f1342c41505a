"""
Category Service

Manages the ``store_categories`` table. When the table has not been
created yet, reads fall back to the category tree in config/categories.yaml.
"""

import logging
import mimetypes
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..catalog.normalizer import parse_timestamp
from ..common.config_loader import load_category_tree, load_default_category_description
from ..models import StoreCategory
from ..supabase import SupabaseClient, SupabaseError
from .products import PRODUCT_BUCKET, image_object_path

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = 'store_categories'
MISSING_TABLE_MESSAGE = (
    "Table store_categories is missing. Run the updated supabase/full_setup.sql."
)


def _unique_stripped(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    result = []
    for value in values:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value not in result:
            result.append(value)
    return result


def normalize_category(row: Dict[str, Any], default_description: str = '') -> StoreCategory:
    """
    Build a StoreCategory from a raw row.

    Subcategories are trimmed and deduplicated, a blank description
    becomes default_description, a missing display_order sorts last and
    only an explicit False deactivates a category.
    """
    display_order = row.get('display_order')
    if not isinstance(display_order, int) or isinstance(display_order, bool):
        display_order = sys.maxsize

    return StoreCategory(
        id=str(row.get('id', '')),
        slug=row.get('slug') or '',
        name=row.get('name') or '',
        description=(row.get('description') or '').strip() or default_description,
        image_url=row.get('image_url') or None,
        subcategories=_unique_stripped(row.get('subcategories')),
        is_active=row.get('is_active') is not False,
        display_order=display_order,
        created_at=parse_timestamp(row.get('created_at')),
        updated_at=parse_timestamp(row.get('updated_at')),
    )


class CategoryService:
    """CRUD for store categories with a configuration fallback."""

    def __init__(self, client: SupabaseClient, bucket: str = PRODUCT_BUCKET):
        self.client = client
        self.bucket = bucket
        self._default_description = None

    @property
    def default_description(self) -> str:
        if self._default_description is None:
            self._default_description = load_default_category_description()
        return self._default_description

    def fallback_categories(self) -> List[StoreCategory]:
        """Categories built from config/categories.yaml."""
        now = datetime.now(timezone.utc).isoformat()
        return [
            normalize_category({
                'id': f"fallback-{index + 1}",
                'slug': category.get('slug'),
                'name': category.get('name'),
                'description': category.get('description'),
                'image_url': None,
                'subcategories': category.get('subcategories', []),
                'is_active': True,
                'display_order': index,
                'created_at': now,
                'updated_at': now,
            }, self.default_description)
            for index, category in enumerate(load_category_tree())
        ]

    def list_categories(self) -> List[StoreCategory]:
        """Categories ordered by display_order then creation date."""
        try:
            rows = self.client.select(
                CATEGORIES_TABLE,
                order=[('display_order', True), ('created_at', True)],
            )
        except SupabaseError as e:
            if e.is_missing_table(CATEGORIES_TABLE):
                logger.warning("store_categories table missing, using configured categories")
                return self.fallback_categories()
            raise

        return [normalize_category(row, self.default_description) for row in rows]

    def upsert_category(self, payload: Dict[str, Any], category_id: Optional[str] = None) -> StoreCategory:
        """
        Insert a category, or update category_id when given.

        Raises:
            SupabaseError: With an actionable message when the table is missing
        """
        try:
            if category_id:
                rows = self.client.update(CATEGORIES_TABLE, payload, {'id': category_id})
            else:
                rows = self.client.insert(CATEGORIES_TABLE, payload)
        except SupabaseError as e:
            if e.is_missing_table(CATEGORIES_TABLE):
                raise SupabaseError(MISSING_TABLE_MESSAGE, code=e.code, status=e.status) from e
            raise

        if not rows:
            raise SupabaseError(f"Category not found: {category_id}")
        return normalize_category(rows[0], self.default_description)

    def remove_category(self, category_id: str) -> None:
        try:
            self.client.delete(CATEGORIES_TABLE, {'id': category_id})
        except SupabaseError as e:
            if e.is_missing_table(CATEGORIES_TABLE):
                raise SupabaseError(MISSING_TABLE_MESSAGE, code=e.code, status=e.status) from e
            raise

    def upload_category_image(self, filename: str, content: bytes) -> str:
        """
        Upload a category cover image.

        Returns:
            Public URL of the image

        Raises:
            SupabaseError: Bucket and permission failures get explicit messages
        """
        path = image_object_path('categories', filename)
        content_type = mimetypes.guess_type(filename)[0] or 'application/octet-stream'

        try:
            self.client.upload(self.bucket, path, content, content_type=content_type)
        except SupabaseError as e:
            lowered = e.message.lower()
            if 'bucket' in lowered:
                raise SupabaseError(
                    f"Storage bucket {self.bucket} not found. Run the Supabase setup SQL.",
                    code=e.code, status=e.status,
                ) from e
            if 'permission' in lowered or 'not allowed' in lowered or 'row-level' in lowered:
                raise SupabaseError(
                    "Insufficient storage permissions. Apply the project's Supabase policies.",
                    code=e.code, status=e.status,
                ) from e
            raise

        return self.client.public_url(self.bucket, path)
