"""
Store Settings Service

Reads and saves the single ``store_settings`` row (id 1). Blank or missing
values fall back to config/store_settings.yaml.
"""

import logging
from dataclasses import fields
from typing import Any, Dict, Optional

from ..common.config_loader import load_default_store_settings
from ..models import StoreSettings
from ..supabase import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

SETTINGS_TABLE = 'store_settings'
SETTINGS_ROW_ID = 1
MISSING_TABLE_MESSAGE = (
    "Table store_settings is missing in Supabase. Run the updated supabase/full_setup.sql."
)


def normalize_store_settings(
    values: Optional[Dict[str, Any]],
    defaults: StoreSettings,
) -> StoreSettings:
    """Trim every field, replacing blank or missing ones with the default."""
    values = values or {}
    normalized = {}
    for f in fields(StoreSettings):
        raw = values.get(f.name)
        text = raw.strip() if isinstance(raw, str) else ''
        normalized[f.name] = text or getattr(defaults, f.name)
    return StoreSettings(**normalized)


class StoreSettingsService:
    """
    Storefront copy persistence.

    Usage:
        service = StoreSettingsService(client)
        settings = service.get_settings()
        settings.hero_title = "Nouvelle collection"
        service.save_settings(settings)
    """

    def __init__(self, client: Optional[SupabaseClient], defaults: Optional[StoreSettings] = None):
        """
        Args:
            client: Supabase client, or None to serve defaults only
            defaults: Default copy (loaded from config if None)
        """
        self.client = client
        self.defaults = defaults or StoreSettings(**load_default_store_settings())

    def get_settings(self) -> StoreSettings:
        if self.client is None:
            return self.defaults

        try:
            row = self.client.select_one(SETTINGS_TABLE, {'id': SETTINGS_ROW_ID})
        except SupabaseError as e:
            if e.is_missing_table(SETTINGS_TABLE):
                logger.warning("store_settings table missing, using defaults")
                return self.defaults
            raise

        if row is None:
            return self.defaults
        return normalize_store_settings(row, self.defaults)

    def save_settings(self, settings: StoreSettings) -> StoreSettings:
        """
        Upsert the settings row.

        Returns:
            Stored settings, normalised
        """
        normalized = normalize_store_settings(settings.to_dict(), self.defaults)
        if self.client is None:
            return normalized

        try:
            rows = self.client.upsert(
                SETTINGS_TABLE,
                {'id': SETTINGS_ROW_ID, **normalized.to_dict()},
                on_conflict='id',
            )
        except SupabaseError as e:
            if e.is_missing_table(SETTINGS_TABLE):
                raise SupabaseError(MISSING_TABLE_MESSAGE, code=e.code, status=e.status) from e
            raise

        logger.info("Store settings saved")
        return normalize_store_settings(rows[0] if rows else None, self.defaults)
