"""
Shopping Cart

In-memory cart keyed by product and size, persisted as JSON.
Loading is tolerant: corrupt files and malformed lines are dropped
rather than failing the session.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from ..catalog.normalizer import DEFAULT_SIZE, normalize_product, product_to_row
from ..models import CartItem, ProductRecord

logger = logging.getLogger(__name__)


def resolve_size(product: ProductRecord, selected_size: Optional[str] = None) -> str:
    """Chosen size if not blank, else the product's first size, else the default."""
    normalized = (selected_size or '').strip()
    if normalized:
        return normalized
    if product.sizes:
        return product.sizes[0]
    return DEFAULT_SIZE


def line_id(product_id: str, size: str) -> str:
    return f"{product_id}::{size.lower()}"


class Cart:
    """
    Shopping cart.

    Usage:
        cart = Cart.load("cart.json")
        cart.add(product, "M", quantity=2)
        cart.save("cart.json")
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self.items: List[CartItem] = []
        for item in items or []:
            self._merge(item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def _find(self, item_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.line_id == item_id:
                return item
        return None

    def _merge(self, item: CartItem) -> None:
        existing = self._find(item.line_id)
        if existing is None:
            self.items.append(item)
        else:
            existing.quantity += item.quantity

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> float:
        return sum(item.line_total for item in self.items)

    def add(self, product: ProductRecord, selected_size: Optional[str] = None, quantity: int = 1) -> CartItem:
        """
        Add product to the cart, merging with an existing line of the same size.

        Quantities below 1 are raised to 1.

        Returns:
            The cart line holding the product
        """
        size = resolve_size(product, selected_size)
        item = CartItem(
            line_id=line_id(product.id, size),
            product=product,
            selected_size=size,
            quantity=max(1, quantity),
        )
        self._merge(item)
        return self._find(item.line_id)

    def remove(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.line_id != item_id]

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(item_id)
            return

        item = self._find(item_id)
        if item is not None:
            item.quantity = quantity

    def clear(self) -> None:
        self.items = []

    # -- Persistence ---------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps([
            {
                'line_id': item.line_id,
                'product': product_to_row(item.product),
                'selected_size': item.selected_size,
                'quantity': item.quantity,
            }
            for item in self.items
        ], ensure_ascii=False)

    @staticmethod
    def _item_from_data(data: Any) -> Optional[CartItem]:
        if not isinstance(data, dict):
            return None
        raw_product = data.get('product')
        if not isinstance(raw_product, dict) or not raw_product.get('id'):
            return None

        product = normalize_product(raw_product)
        size = resolve_size(product, data.get('selected_size'))
        quantity = data.get('quantity')
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            quantity = 1

        return CartItem(
            line_id=data.get('line_id') or line_id(product.id, size),
            product=product,
            selected_size=size,
            quantity=quantity,
        )

    @classmethod
    def from_json(cls, raw: Optional[str]) -> 'Cart':
        """
        Rebuild a cart from to_json() output.

        Invalid JSON or a non-list payload gives an empty cart; malformed
        lines are skipped and duplicate lines are merged.
        """
        if not raw:
            return cls()
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable cart data")
            return cls()
        if not isinstance(parsed, list):
            return cls()

        items = [cls._item_from_data(entry) for entry in parsed]
        return cls([item for item in items if item is not None])

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_text(self.to_json(), encoding='utf-8')

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Cart':
        """Load a saved cart; a missing file gives an empty cart."""
        path = Path(path)
        if not path.exists():
            return cls()
        return cls.from_json(path.read_text(encoding='utf-8'))
