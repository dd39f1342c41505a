from .cart import Cart, line_id, resolve_size

__all__ = ['Cart', 'line_id', 'resolve_size']
