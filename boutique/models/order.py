"""
Cart and order data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .product import EPOCH, ProductRecord

ORDER_STATUSES = ('pending', 'paid', 'processing', 'shipped', 'delivered', 'cancelled')


@dataclass
class CartItem:
    """One cart line: a product in a given size."""
    line_id: str
    product: ProductRecord
    selected_size: str
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


@dataclass
class ShippingAddress:
    """Delivery address stored as JSON on the order row."""
    line1: str
    city: str
    postal_code: str = "00000"
    country: str = "Senegal"
    line2: str = ""

    def to_dict(self) -> Dict[str, str]:
        data = {
            'line1': self.line1,
            'city': self.city,
            'postal_code': self.postal_code,
            'country': self.country,
        }
        if self.line2:
            data['line2'] = self.line2
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ShippingAddress':
        data = data or {}
        return cls(
            line1=data.get('line1', ''),
            city=data.get('city', ''),
            postal_code=data.get('postal_code', '00000'),
            country=data.get('country', 'Senegal'),
            line2=data.get('line2') or '',
        )


@dataclass
class OrderItem:
    """Order line as stored in the order_items table."""
    id: str
    order_id: str
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    subtotal: float
    selected_size: Optional[str] = None


@dataclass
class Order:
    """Customer order with its lines."""
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    shipping_address: ShippingAddress
    total_amount: float
    status: str = 'pending'
    user_id: Optional[str] = None
    customer_phone: Optional[str] = None
    created_at: datetime = EPOCH
    updated_at: datetime = EPOCH
    items: List[OrderItem] = field(default_factory=list)


@dataclass
class CheckoutPayload:
    """Everything needed to create an order from a cart."""
    customer_name: str
    customer_email: str
    shipping_address: ShippingAddress
    items: List[CartItem]
    customer_phone: Optional[str] = None
    user_id: Optional[str] = None
