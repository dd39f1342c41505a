"""
Backend services.

Modules:
    products       - Product repository (list, slug lookup, upsert, delete, image upload)
    categories     - Store categories with configuration fallback
    store_settings - Editable storefront copy
    orders         - Order creation, listing and status updates
"""

from .categories import CategoryService
from .orders import OrderService
from .products import PRODUCT_BUCKET, ProductRepository
from .store_settings import StoreSettingsService

__all__ = [
    'CategoryService',
    'OrderService',
    'PRODUCT_BUCKET',
    'ProductRepository',
    'StoreSettingsService',
]
