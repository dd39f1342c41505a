"""
Order Service

Creates orders (one ``orders`` row plus its ``order_items``), lists them
for the back office and updates their status.
"""

import logging
from typing import Any, Dict, List

from ..catalog.normalizer import parse_timestamp
from ..models import ORDER_STATUSES, CheckoutPayload, Order, OrderItem, ShippingAddress
from ..supabase import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

ORDERS_TABLE = 'orders'
ORDER_ITEMS_TABLE = 'order_items'


def _order_item_from_row(row: Dict[str, Any]) -> OrderItem:
    return OrderItem(
        id=str(row.get('id', '')),
        order_id=str(row.get('order_id', '')),
        product_id=str(row.get('product_id', '')),
        product_name=row.get('product_name') or '',
        selected_size=row.get('selected_size'),
        unit_price=row.get('unit_price') or 0,
        quantity=row.get('quantity') or 0,
        subtotal=row.get('subtotal') or 0,
    )


def order_from_row(row: Dict[str, Any]) -> Order:
    return Order(
        id=str(row.get('id', '')),
        order_number=row.get('order_number') or '',
        user_id=row.get('user_id'),
        customer_name=row.get('customer_name') or '',
        customer_email=row.get('customer_email') or '',
        customer_phone=row.get('customer_phone'),
        shipping_address=ShippingAddress.from_dict(row.get('shipping_address')),
        status=row.get('status') or 'pending',
        total_amount=row.get('total_amount') or 0,
        created_at=parse_timestamp(row.get('created_at')),
        updated_at=parse_timestamp(row.get('updated_at')),
        items=[_order_item_from_row(item) for item in row.get('order_items') or []],
    )


class OrderService:
    """Order persistence."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def list_orders(self) -> List[Order]:
        """All orders with their items, newest first."""
        rows = self.client.select(
            ORDERS_TABLE,
            columns='*, order_items(*)',
            order=[('created_at', False)],
        )
        return [order_from_row(row) for row in rows]

    def create_order(self, payload: CheckoutPayload) -> Order:
        """
        Create an order and its lines from a checkout payload.

        Raises:
            ValueError: If the cart is empty
            SupabaseError: On API failure
        """
        if not payload.items:
            raise ValueError("Cart is empty")

        total_amount = sum(item.product.price * item.quantity for item in payload.items)

        rows = self.client.insert(ORDERS_TABLE, {
            'user_id': payload.user_id,
            'customer_name': payload.customer_name,
            'customer_email': payload.customer_email,
            'customer_phone': payload.customer_phone,
            'shipping_address': payload.shipping_address.to_dict(),
            'total_amount': total_amount,
            'status': 'pending',
        })
        if not rows:
            raise SupabaseError("Order insert returned no row")
        order = order_from_row(rows[0])

        item_rows = [
            {
                'order_id': order.id,
                'product_id': item.product.id,
                'product_name': item.product.name,
                'selected_size': item.selected_size,
                'unit_price': item.product.price,
                'quantity': item.quantity,
                'subtotal': item.quantity * item.product.price,
            }
            for item in payload.items
        ]
        try:
            stored_items = self.client.insert(ORDER_ITEMS_TABLE, item_rows)
        except SupabaseError as e:
            # The order row is already stored without its lines
            logger.error("Order %s (id %s) stored but its items failed: %s",
                         order.order_number, order.id, e)
            raise
        order.items = [_order_item_from_row(row) for row in stored_items]

        logger.info("Created order %s (%d items, total %s)",
                    order.order_number or order.id, len(item_rows), total_amount)
        return order

    def update_order_status(self, order_id: str, status: str) -> None:
        """
        Raises:
            ValueError: If status is not one of ORDER_STATUSES
        """
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status: {status}")
        self.client.update(ORDERS_TABLE, {'status': status}, {'id': order_id})
        logger.info("Order %s -> %s", order_id, status)
