"""Tests for boutique/services/products.py"""

import pytest

from boutique.common.cache import TTLCache
from boutique.models import ProductPayload, StorefrontEntry
from boutique.services.products import ProductRepository, image_object_path
from boutique.supabase import SupabaseError


def row(slug, name, created_at, **extra):
    data = {
        'id': f"id-{slug}",
        'slug': slug,
        'name': name,
        'main_category': 'Vêtements Femmes',
        'sub_category': 'Robes',
        'stock': 1,
        'price': 25000,
        'created_at': created_at,
    }
    data.update(extra)
    return data


@pytest.fixture
def rows():
    return [
        row('robe-soir-rouge', 'Robe Soir - Rouge', '2024-01-02T00:00:00Z', stock=2),
        row('robe-soir-bleu', 'Robe Soir - Bleu', '2024-01-01T00:00:00Z', stock=0, is_out_of_stock=True),
        row('robe-soir-rouge', 'Robe Soir - Rouge', '2024-01-02T00:00:00Z', stock=2),
    ]


@pytest.fixture
def payload():
    return ProductPayload(
        name="  Robe Soir - Vert ",
        slug="robe-soir-vert",
        main_category="Vêtements Femmes",
        sub_category="Robes",
        price=25000,
        stock=4,
    )


class TestImageObjectPath:
    def test_keeps_extension_lowercased(self):
        path = image_object_path('products', 'Photo.JPG')
        assert path.startswith('products/')
        assert path.endswith('.jpg')

    def test_default_extension(self):
        assert image_object_path('categories', 'cover').endswith('.jpg')

    def test_paths_are_unique(self):
        assert image_object_path('products', 'a.png') != image_object_path('products', 'a.png')


class TestListProducts:
    def test_selects_newest_first(self, mock_client, rows):
        mock_client.select.return_value = rows
        repository = ProductRepository(mock_client)

        products = repository.list_products()

        mock_client.select.assert_called_once_with('products', order=[('created_at', False)])
        assert [p.slug for p in products] == ['robe-soir-rouge', 'robe-soir-bleu', 'robe-soir-rouge']

    def test_rows_are_normalised(self, mock_client, rows):
        mock_client.select.return_value = rows
        products = ProductRepository(mock_client, default_size="TU").list_products()
        assert products[0].sizes == ["TU"]

    def test_uses_cache(self, mock_client, rows):
        mock_client.select.return_value = rows
        repository = ProductRepository(mock_client, cache=TTLCache(ttl=60))

        repository.list_products()
        repository.list_products()

        assert mock_client.select.call_count == 1

    def test_errors_propagate(self, mock_client):
        mock_client.select.side_effect = SupabaseError("boom", status=500)
        with pytest.raises(SupabaseError):
            ProductRepository(mock_client).list_products()


class TestStorefront:
    def test_list_storefront_groups_variants(self, mock_client, rows):
        mock_client.select.return_value = rows

        entries = ProductRepository(mock_client).list_storefront()

        assert len(entries) == 1
        assert isinstance(entries[0], StorefrontEntry)
        assert entries[0].name == 'Robe Soir'
        assert entries[0].stock == 2
        assert entries[0].variant_slugs == ['robe-soir-rouge', 'robe-soir-bleu']

    def test_get_related_variants(self, mock_client, rows):
        mock_client.select.return_value = rows
        repository = ProductRepository(mock_client)
        target = repository.list_products()[1]

        related = repository.get_related_variants(target)

        assert [p.name for p in related] == ['Robe Soir - Bleu', 'Robe Soir - Rouge']

    def test_get_product_by_slug(self, mock_client, rows):
        mock_client.select_one.return_value = rows[0]

        product = ProductRepository(mock_client).get_product_by_slug('robe-soir-rouge')

        mock_client.select_one.assert_called_once_with('products', {'slug': 'robe-soir-rouge'})
        assert product.slug == 'robe-soir-rouge'

    def test_get_product_by_slug_missing(self, mock_client):
        assert ProductRepository(mock_client).get_product_by_slug('nope') is None


class TestWrites:
    def test_insert(self, mock_client, payload):
        mock_client.insert.return_value = [row('robe-soir-vert', 'Robe Soir - Vert', '2024-02-01T00:00:00Z')]

        product = ProductRepository(mock_client).upsert_product(payload)

        table, data = mock_client.insert.call_args.args
        assert table == 'products'
        assert data['name'] == 'Robe Soir - Vert'
        assert product.slug == 'robe-soir-vert'

    def test_update(self, mock_client, payload):
        mock_client.update.return_value = [row('robe-soir-vert', 'Robe Soir - Vert', '2024-02-01T00:00:00Z')]

        ProductRepository(mock_client).upsert_product(payload, product_id='id-1')

        assert mock_client.update.call_args.args[2] == {'id': 'id-1'}
        mock_client.insert.assert_not_called()

    def test_update_unknown_product(self, mock_client, payload):
        mock_client.update.return_value = []
        with pytest.raises(SupabaseError, match="Product not found"):
            ProductRepository(mock_client).upsert_product(payload, product_id='missing')

    def test_writes_invalidate_cache(self, mock_client, payload, rows):
        mock_client.select.return_value = rows
        mock_client.insert.return_value = [row('robe-soir-vert', 'Robe Soir - Vert', '2024-02-01T00:00:00Z')]
        repository = ProductRepository(mock_client, cache=TTLCache(ttl=60))

        repository.list_products()
        repository.upsert_product(payload)
        repository.list_products()
        repository.remove_product('id-robe-soir-vert')
        repository.list_products()

        assert mock_client.select.call_count == 3

    def test_remove_product(self, mock_client):
        ProductRepository(mock_client).remove_product('id-1')
        mock_client.delete.assert_called_once_with('products', {'id': 'id-1'})

    def test_upload_product_image(self, mock_client):
        url = ProductRepository(mock_client).upload_product_image('robe.png', b'png')

        bucket, path, content = mock_client.upload.call_args.args
        assert bucket == 'product-images'
        assert path.startswith('products/') and path.endswith('.png')
        assert content == b'png'
        assert mock_client.upload.call_args.kwargs['content_type'] == 'image/png'
        assert url == f"https://cdn.example.com/product-images/{path}"


class TestProductPayload:
    def test_blank_name_rejected(self):
        with pytest.raises(ValueError, match="name is required"):
            ProductPayload(name="  ", slug="x", main_category="A", sub_category="B")

    def test_blank_slug_rejected(self):
        with pytest.raises(ValueError, match="slug is required"):
            ProductPayload(name="Robe", slug="", main_category="A", sub_category="B")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValueError):
            ProductPayload(name="Robe", slug="robe", main_category="A", sub_category="B", stock=-1)

    def test_to_dict_strips_identity(self, payload):
        data = payload.to_dict()
        assert data['name'] == 'Robe Soir - Vert'
        assert data['slug'] == 'robe-soir-vert'
        assert 'id' not in data
