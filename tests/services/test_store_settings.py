"""Tests for boutique/services/store_settings.py"""

import pytest

from boutique.models import StoreSettings
from boutique.services.store_settings import (
    MISSING_TABLE_MESSAGE,
    StoreSettingsService,
    normalize_store_settings,
)
from boutique.supabase import SupabaseError


@pytest.fixture
def defaults():
    return StoreSettings(
        hero_title="Mode femme",
        contact_phone="+221 77 000 00 00",
        order_chat_number="770000000",
    )


class TestNormalizeStoreSettings:
    def test_blank_values_use_defaults(self, defaults):
        settings = normalize_store_settings({'hero_title': '   ', 'contact_phone': ' +221 70 '}, defaults)

        assert settings.hero_title == "Mode femme"
        assert settings.contact_phone == "+221 70"

    def test_none_values(self, defaults):
        assert normalize_store_settings(None, defaults) == defaults

    def test_ignores_unknown_keys_and_non_strings(self, defaults):
        settings = normalize_store_settings({'id': 1, 'hero_title': 42}, defaults)
        assert settings.hero_title == "Mode femme"


class TestGetSettings:
    def test_without_client_returns_defaults(self, defaults):
        assert StoreSettingsService(None, defaults).get_settings() == defaults

    def test_loads_defaults_from_config(self):
        service = StoreSettingsService(None)
        assert service.get_settings().order_chat_number == "774931474"

    def test_reads_row(self, mock_client, defaults):
        mock_client.select_one.return_value = {'id': 1, 'hero_title': 'Soldes'}

        settings = StoreSettingsService(mock_client, defaults).get_settings()

        mock_client.select_one.assert_called_once_with('store_settings', {'id': 1})
        assert settings.hero_title == 'Soldes'
        assert settings.order_chat_number == '770000000'

    def test_missing_row(self, mock_client, defaults):
        mock_client.select_one.return_value = None
        assert StoreSettingsService(mock_client, defaults).get_settings() == defaults

    def test_missing_table(self, mock_client, defaults):
        mock_client.select_one.side_effect = SupabaseError("relation does not exist", code="42P01")
        assert StoreSettingsService(mock_client, defaults).get_settings() == defaults

    def test_other_errors_propagate(self, mock_client, defaults):
        mock_client.select_one.side_effect = SupabaseError("JWT expired", status=401)
        with pytest.raises(SupabaseError):
            StoreSettingsService(mock_client, defaults).get_settings()


class TestSaveSettings:
    def test_upserts_row_one(self, mock_client, defaults):
        mock_client.upsert.return_value = [{'id': 1, 'hero_title': 'Soldes'}]

        saved = StoreSettingsService(mock_client, defaults).save_settings(
            StoreSettings(hero_title=' Soldes ')
        )

        table, data = mock_client.upsert.call_args.args
        assert table == 'store_settings'
        assert data['id'] == 1
        assert data['hero_title'] == 'Soldes'
        assert data['contact_phone'] == '+221 77 000 00 00'
        assert mock_client.upsert.call_args.kwargs == {'on_conflict': 'id'}
        assert saved.hero_title == 'Soldes'

    def test_without_client(self, defaults):
        saved = StoreSettingsService(None, defaults).save_settings(StoreSettings(hero_title='Soldes'))
        assert saved.hero_title == 'Soldes'
        assert saved.contact_phone == defaults.contact_phone

    def test_missing_table(self, mock_client, defaults):
        mock_client.upsert.side_effect = SupabaseError("relation does not exist", code="42P01")
        with pytest.raises(SupabaseError) as excinfo:
            StoreSettingsService(mock_client, defaults).save_settings(StoreSettings())
        assert excinfo.value.message == MISSING_TABLE_MESSAGE
