# Common utilities
from .cache import TTLCache
from .config_loader import (
    get_main_category_names,
    get_subcategories,
    get_supabase_credentials,
    load_catalog_settings,
    load_category_tree,
    load_config,
    load_default_store_settings,
    load_shipping_config,
)
from .formatting import format_currency, format_date
from .log_config import setup_logging
from .transliteration import normalize_key, slugify, strip_accents
