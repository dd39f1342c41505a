"""Shared test fixtures."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from boutique.models import ProductRecord


def make_product(**overrides) -> ProductRecord:
    """Build a ProductRecord with sensible defaults."""
    created_at = overrides.pop('created_at', '2024-01-01')
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at).replace(tzinfo=timezone.utc)

    slug = overrides.pop('slug', 'robe-soir-rouge')
    values = {
        'id': f"id-{slug}",
        'slug': slug,
        'name': 'Robe Soir - Rouge',
        'main_category': 'Femmes',
        'sub_category': 'Robes',
        'image_url': None,
        'gallery_urls': [],
        'sizes': [],
        'is_out_of_stock': False,
        'stock': 1,
        'is_new': False,
        'is_best_seller': False,
        'price': 25000,
        'created_at': created_at,
    }
    values.update(overrides)
    return ProductRecord(**values)


@pytest.fixture
def product_factory():
    """Factory fixture: product_factory(slug=..., name=..., ...)."""
    return make_product


@pytest.fixture
def robe_rouge():
    return make_product(
        name="Robe Soir - Rouge",
        slug="robe-soir-rouge",
        stock=2,
        is_out_of_stock=False,
        created_at="2024-01-02",
    )


@pytest.fixture
def robe_bleu():
    return make_product(
        name="Robe Soir - Bleu",
        slug="robe-soir-bleu",
        stock=0,
        is_out_of_stock=True,
        created_at="2024-01-01",
    )


@pytest.fixture
def product_row():
    """Raw products table row as returned by the REST API."""
    return {
        'id': 'b6f1c0de-0000-4000-8000-000000000001',
        'name': 'Robe Soir - Rouge',
        'slug': 'robe-soir-rouge',
        'description': 'Robe longue de soirée.',
        'price': 25000,
        'compare_price': None,
        'stock': 3,
        'main_category': 'Vêtements Femmes',
        'sub_category': 'Robes',
        'image_url': 'https://cdn.example.com/robe-rouge.jpg',
        'gallery_urls': ['https://cdn.example.com/robe-rouge-2.jpg'],
        'sizes': [' M ', 'L', '', 'M'],
        'is_out_of_stock': False,
        'is_new': True,
        'is_best_seller': False,
        'created_at': '2024-01-02T10:00:00Z',
        'updated_at': '2024-01-03T10:00:00+00:00',
    }


@pytest.fixture
def mock_client():
    """SupabaseClient double with every method mocked."""
    client = MagicMock()
    client.select.return_value = []
    client.select_one.return_value = None
    client.insert.return_value = []
    client.update.return_value = []
    client.upsert.return_value = []
    client.public_url.side_effect = lambda bucket, path: f"https://cdn.example.com/{bucket}/{path}"
    return client
