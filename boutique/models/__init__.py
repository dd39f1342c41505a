"""
Data models for the storefront.

This module contains pure data classes with no business logic.
"""

from .order import (
    ORDER_STATUSES,
    CartItem,
    CheckoutPayload,
    Order,
    OrderItem,
    ShippingAddress,
)
from .product import EPOCH, ProductPayload, ProductRecord, StorefrontEntry, VariantMeta
from .store import StoreCategory, StoreSettings

__all__ = [
    'EPOCH',
    'ProductRecord',
    'ProductPayload',
    'StorefrontEntry',
    'VariantMeta',
    'CartItem',
    'CheckoutPayload',
    'Order',
    'OrderItem',
    'ORDER_STATUSES',
    'ShippingAddress',
    'StoreCategory',
    'StoreSettings',
]
