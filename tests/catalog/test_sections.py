"""Tests for boutique/catalog/sections.py"""

import pytest

from boutique.catalog.sections import (
    build_home_sections,
    count_by_main_category,
    filter_by_category,
    newest_first,
    search_entries,
    section_size,
)


@pytest.fixture
def catalogue(product_factory):
    return [
        product_factory(slug="p1", name="Sac Cabas", main_category="Sacs & Bagages",
                        sub_category="Sacs à main", is_best_seller=True, created_at="2024-01-01"),
        product_factory(slug="p2", name="Robe Soir", is_new=True, created_at="2024-01-02"),
        product_factory(slug="p3", name="Top Noir", sub_category="Tops", created_at="2024-01-03"),
        product_factory(slug="p4", name="Jupe Plissée", sub_category="Jupes", created_at="2024-01-04"),
        product_factory(slug="p5", name="Robe Été", is_new=True, created_at="2024-01-05"),
        product_factory(slug="p6", name="Baskets Blanches", main_category="Chaussures",
                        sub_category="Baskets", created_at="2024-01-06"),
    ]


class TestSectionSize:
    @pytest.mark.parametrize("total,expected", [
        (0, 1),
        (1, 1),
        (3, 1),
        (4, 2),
        (24, 8),
        (100, 8),
    ])
    def test_third_of_catalogue_bounded(self, total, expected):
        assert section_size(total) == expected


class TestNewestFirst:
    def test_orders_by_created_at(self, catalogue):
        assert [p.slug for p in newest_first(catalogue)] == ["p6", "p5", "p4", "p3", "p2", "p1"]


class TestBuildHomeSections:
    def test_sections_never_repeat_products(self, catalogue):
        sections = build_home_sections(catalogue)

        slugs = [p.slug for section in sections.values() for p in section]
        assert len(slugs) == len(set(slugs))

    def test_selection(self, catalogue):
        sections = build_home_sections(catalogue)

        assert [p.slug for p in sections['soft_collection']] == ["p6", "p5"]
        assert [p.slug for p in sections['new_in']] == ["p2", "p4"]
        assert [p.slug for p in sections['favorites']] == ["p1", "p3"]

    def test_empty_catalogue(self):
        assert build_home_sections([]) == {'soft_collection': [], 'new_in': [], 'favorites': []}

    def test_small_catalogue_leaves_later_rails_short(self, product_factory):
        sections = build_home_sections([product_factory(slug="only")])

        assert [p.slug for p in sections['soft_collection']] == ["only"]
        assert sections['new_in'] == []
        assert sections['favorites'] == []


class TestCategories:
    def test_count_by_main_category(self, catalogue):
        assert count_by_main_category(catalogue) == {
            'Sacs & Bagages': 1,
            'Femmes': 4,
            'Chaussures': 1,
        }

    def test_filter_by_main_category(self, catalogue):
        result = filter_by_category(catalogue, main_category="Femmes")
        assert [p.slug for p in result] == ["p2", "p3", "p4", "p5"]

    def test_filter_by_sub_category(self, catalogue):
        result = filter_by_category(catalogue, main_category="Femmes", sub_category="Robes")
        assert [p.slug for p in result] == ["p2", "p5"]

    def test_no_filter_returns_everything(self, catalogue):
        assert filter_by_category(catalogue) == catalogue


class TestSearchEntries:
    def test_blank_term_returns_all(self, catalogue):
        assert search_entries(catalogue, "   ") == catalogue

    def test_matches_name_ignoring_case_and_accents(self, catalogue):
        assert [p.slug for p in search_entries(catalogue, "ROBE ete")] == ["p5"]

    def test_matches_category(self, catalogue):
        assert [p.slug for p in search_entries(catalogue, "baskets")] == ["p6"]

    def test_every_word_must_match(self, catalogue):
        assert search_entries(catalogue, "robe noir") == []

    def test_matches_sub_category_with_accent(self, catalogue):
        assert [p.slug for p in search_entries(catalogue, "sacs a main")] == ["p1"]
