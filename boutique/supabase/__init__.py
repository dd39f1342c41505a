"""
Supabase integration.

Modules:
    api_client - table and Storage client over the supabase SDK
"""

from .api_client import (
    MISSING_TABLE_CODES,
    SupabaseClient,
    SupabaseError,
    SupabaseNotConfiguredError,
)

__all__ = [
    'MISSING_TABLE_CODES',
    'SupabaseClient',
    'SupabaseError',
    'SupabaseNotConfiguredError',
]
