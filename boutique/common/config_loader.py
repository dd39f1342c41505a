"""
Configuration Loader

Loads YAML configuration files (category tree, default store settings,
shipping options, catalogue defaults) and backend credentials from the
environment.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

# Environment variables checked in order for the backend URL and public key
SUPABASE_URL_VARS = ('SUPABASE_URL', 'NEXT_PUBLIC_SUPABASE_URL', 'VITE_SUPABASE_URL')
SUPABASE_KEY_VARS = (
    'SUPABASE_ANON_KEY',
    'SUPABASE_PUBLISHABLE_KEY',
    'NEXT_PUBLIC_SUPABASE_PUBLISHABLE_KEY',
    'NEXT_PUBLIC_SUPABASE_ANON_KEY',
    'VITE_SUPABASE_PUBLISHABLE_KEY',
    'VITE_SUPABASE_ANON_KEY',
)
ORDER_CHAT_NUMBER_VARS = ('ORDER_CHAT_NUMBER', 'NEXT_PUBLIC_ORDER_CHAT_NUMBER')


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'categories.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_category_tree() -> List[Dict[str, Any]]:
    """
    Load the reference category tree.

    Returns:
        List of category dicts with slug, name, description, subcategories

    Example:
        [
            {'slug': 'chaussures', 'name': 'Chaussures',
             'description': '...', 'subcategories': ['Baskets', ...]},
            ...
        ]
    """
    config = load_config('categories.yaml')
    return config.get('categories', [])


def load_default_category_description() -> str:
    config = load_config('categories.yaml')
    return config.get('default_description', '')


def get_main_category_names(tree: Optional[List[Dict[str, Any]]] = None) -> List[str]:
    """
    Get main category names in display order.

    Args:
        tree: Category tree (if None, loads from config)
    """
    if tree is None:
        tree = load_category_tree()

    return [category['name'] for category in tree]


def get_subcategories(main_category: str, tree: Optional[List[Dict[str, Any]]] = None) -> List[str]:
    """
    Get subcategories of a main category (exact name match).

    Returns:
        Subcategory names, or an empty list for an unknown category
    """
    if tree is None:
        tree = load_category_tree()

    for category in tree:
        if category['name'] == main_category:
            return list(category.get('subcategories', []))
    return []


def load_default_store_settings() -> Dict[str, str]:
    """
    Load default storefront copy.

    Returns:
        Dictionary of store settings field -> default text
    """
    config = load_config('store_settings.yaml')
    return config.get('store_settings', {})


def load_shipping_config() -> Dict[str, Any]:
    """
    Load checkout transit options and chat number defaults.

    Returns:
        Dictionary with 'shipping_options', 'default_chat_number'
        and 'country_calling_code'
    """
    return load_config('shipping_options.yaml')


def load_catalog_settings() -> Dict[str, Any]:
    """
    Load catalogue defaults (default size label, bucket, local import rules).
    """
    return load_config('catalog.yaml')


def _first_env(names: Tuple[str, ...]) -> str:
    for name in names:
        value = os.environ.get(name, '').strip()
        if value:
            return value
    return ''


def get_supabase_credentials() -> Tuple[str, str]:
    """
    Read the Supabase project URL and public key from the environment.

    Returns:
        (url, key); either may be empty when not configured
    """
    return _first_env(SUPABASE_URL_VARS), _first_env(SUPABASE_KEY_VARS)


def get_order_chat_number_override() -> str:
    """Chat number from the environment, used when store settings have none."""
    return _first_env(ORDER_CHAT_NUMBER_VARS)
