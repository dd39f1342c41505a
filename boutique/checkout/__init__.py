from .handoff import (
    CheckoutError,
    CheckoutForm,
    CheckoutResult,
    ShippingOption,
    build_chat_url,
    build_order_message,
    fallback_email,
    get_shipping_option,
    load_shipping_options,
    normalize_chat_number,
    resolve_chat_number,
    submit_checkout,
)

__all__ = [
    'CheckoutError',
    'CheckoutForm',
    'CheckoutResult',
    'ShippingOption',
    'build_chat_url',
    'build_order_message',
    'fallback_email',
    'get_shipping_option',
    'load_shipping_options',
    'normalize_chat_number',
    'resolve_chat_number',
    'submit_checkout',
]
