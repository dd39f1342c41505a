"""
Checkout Chat Handoff

Orders are confirmed in a WhatsApp conversation: the checkout records
the order, then sends the customer to a wa.me link whose text is a
French summary of the cart, the chosen transit option and the address.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from ..cart import Cart
from ..common.config_loader import get_order_chat_number_override, load_shipping_config
from ..common.formatting import format_currency
from ..models import CartItem, CheckoutPayload, Order, ShippingAddress
from ..services.orders import OrderService

logger = logging.getLogger(__name__)

COUNTRY_CALLING_CODE = '221'
CHAT_BASE_URL = 'https://wa.me'


class CheckoutError(Exception):
    """Checkout cannot proceed (empty cart, missing option or chat number)."""


@dataclass(frozen=True)
class ShippingOption:
    """Transit option offered at checkout."""
    id: str
    name: str
    price_label: str
    timeline: str

    def describe(self) -> str:
        return f"{self.name} ({self.price_label}, {self.timeline})"


@dataclass
class CheckoutForm:
    """Customer details entered at checkout."""
    customer_name: str
    customer_phone: str = ''
    line1: str = ''
    city: str = ''
    note: str = ''


@dataclass
class CheckoutResult:
    order: Order
    message: str
    chat_url: str


def load_shipping_options(config: Optional[Dict[str, Any]] = None) -> List[ShippingOption]:
    if config is None:
        config = load_shipping_config()
    return [ShippingOption(**option) for option in config.get('shipping_options', [])]


def get_shipping_option(
    shipping_id: str,
    options: Optional[Sequence[ShippingOption]] = None,
) -> Optional[ShippingOption]:
    if options is None:
        options = load_shipping_options()
    for option in options:
        if option.id == shipping_id:
            return option
    return None


def normalize_chat_number(raw_number: str, calling_code: str = COUNTRY_CALLING_CODE) -> str:
    """
    Turn a phone number into the digits-only international form wa.me expects.

    Local Senegalese mobile numbers (9 digits starting with 7, optionally
    written with a leading 0) get the country calling code prefixed.

    Example:
        >>> normalize_chat_number("77 493 14 74")
        '221774931474'
    """
    digits = re.sub(r'\D', '', raw_number or '')

    if len(digits) == 9 and digits.startswith('7'):
        return f"{calling_code}{digits}"

    if len(digits) == 10 and digits.startswith('0'):
        local = digits[1:]
        if local.startswith('7'):
            return f"{calling_code}{local}"

    return digits


def fallback_email(phone: str) -> str:
    """Placeholder address for customers who only give a phone number."""
    digits = re.sub(r'\D', '', phone or '')
    return f"commande-{digits or 'client'}@hotgyaal.local"


def build_order_message(
    form: CheckoutForm,
    items: Sequence[CartItem],
    subtotal: float,
    shipping_option: ShippingOption,
    order_number: Optional[str] = None,
) -> str:
    """Compose the order summary sent to the shop's chat number."""
    lines = [
        'Nouvelle commande HOTGYAAL',
        f"Reference: {order_number}" if order_number else 'Reference: En attente',
        '',
        f"Nom: {form.customer_name}",
        f"Telephone: {form.customer_phone or 'Non renseigne'}",
        '',
        'Articles:',
    ]

    for index, item in enumerate(items, start=1):
        lines.append(
            f"{index}. {item.product.name} [{item.selected_size}] x{item.quantity}"
            f" - {format_currency(item.line_total)}"
        )

    lines.append('')
    lines.append(f"Sous-total produits: {format_currency(subtotal)}")
    lines.append(
        f"Option transit: {shipping_option.name} - {shipping_option.price_label}"
        f" ({shipping_option.timeline})"
    )
    lines.append('Frais exacts confirms apres verification poids/volume.')
    lines.append('')
    lines.append(f"Adresse: {form.line1}, {form.city}")
    if form.note.strip():
        lines.append(f"Note cliente: {form.note.strip()}")

    return '\n'.join(lines)


def resolve_chat_number(settings_number: str = '', config: Optional[Dict[str, Any]] = None) -> str:
    """
    Chat number used for the handoff, normalised.

    Store settings win, then the ORDER_CHAT_NUMBER environment variable,
    then default_chat_number from config/shipping_options.yaml.
    """
    if config is None:
        config = load_shipping_config()
    raw = (
        (settings_number or '').strip()
        or get_order_chat_number_override()
        or str(config.get('default_chat_number', ''))
    )
    return normalize_chat_number(raw, str(config.get('country_calling_code', COUNTRY_CALLING_CODE)))


def build_chat_url(chat_number: str, message: str) -> str:
    return f"{CHAT_BASE_URL}/{chat_number}?text={quote(message, safe='')}"


def submit_checkout(
    cart: Cart,
    form: CheckoutForm,
    shipping_id: str,
    orders: OrderService,
    chat_number: str,
    user_id: Optional[str] = None,
    shipping_options: Optional[Sequence[ShippingOption]] = None,
) -> CheckoutResult:
    """
    Record the order and prepare the chat handoff.

    The cart is cleared only once the order has been stored.

    Args:
        cart: Customer cart
        form: Customer details
        shipping_id: Chosen ShippingOption id
        orders: Order service used to persist the order
        chat_number: Shop chat number (any format, normalised here)
        user_id: Signed-in customer id, if any
        shipping_options: Available options (loaded from config if None)

    Raises:
        CheckoutError: Empty cart, unknown shipping option or no chat number
    """
    if not cart.items:
        raise CheckoutError("Cart is empty")

    option = get_shipping_option(shipping_id, shipping_options)
    if option is None:
        raise CheckoutError("Choose a transit option")

    number = normalize_chat_number(chat_number)
    if not number:
        raise CheckoutError("Order confirmation number is missing")

    line2 = ' | '.join(
        part for part in (form.note.strip(), f"Transit: {option.describe()}") if part
    )
    items = list(cart.items)
    subtotal = cart.subtotal

    order = orders.create_order(CheckoutPayload(
        user_id=user_id,
        customer_name=form.customer_name,
        customer_email=fallback_email(form.customer_phone),
        customer_phone=form.customer_phone,
        shipping_address=ShippingAddress(
            line1=form.line1,
            line2=line2,
            city=form.city,
        ),
        items=items,
    ))

    message = build_order_message(form, items, subtotal, option, order.order_number)
    cart.clear()

    logger.info("Checkout complete for order %s", order.order_number or order.id)
    return CheckoutResult(order=order, message=message, chat_url=build_chat_url(number, message))
