"""Tests for boutique/cart/cart.py"""

import json

from boutique.cart import Cart, line_id, resolve_size
from boutique.catalog.normalizer import DEFAULT_SIZE


class TestResolveSize:
    def test_selected_size(self, robe_rouge):
        assert resolve_size(robe_rouge, " M ") == "M"

    def test_first_product_size(self, product_factory):
        assert resolve_size(product_factory(sizes=["S", "M"])) == "S"

    def test_default_size(self, product_factory):
        assert resolve_size(product_factory(sizes=[]), "  ") == DEFAULT_SIZE


class TestLineId:
    def test_size_is_lowercased(self):
        assert line_id("p1", "XL") == "p1::xl"


class TestCart:
    def test_add_new_line(self, robe_rouge):
        cart = Cart()

        item = cart.add(robe_rouge, "M", quantity=2)

        assert item.line_id == "id-robe-soir-rouge::m"
        assert cart.total_items == 2
        assert cart.subtotal == 50000

    def test_add_same_line_merges(self, robe_rouge):
        cart = Cart()
        cart.add(robe_rouge, "M")
        item = cart.add(robe_rouge, "m ")

        assert len(cart) == 1
        assert item.quantity == 2

    def test_different_sizes_are_separate_lines(self, robe_rouge):
        cart = Cart()
        cart.add(robe_rouge, "M")
        cart.add(robe_rouge, "L")
        assert len(cart) == 2

    def test_quantity_clamped_to_one(self, robe_rouge):
        cart = Cart()
        assert cart.add(robe_rouge, "M", quantity=0).quantity == 1

    def test_update_quantity(self, robe_rouge):
        cart = Cart()
        item = cart.add(robe_rouge, "M")

        cart.update_quantity(item.line_id, 5)

        assert cart.total_items == 5

    def test_update_quantity_zero_removes(self, robe_rouge):
        cart = Cart()
        item = cart.add(robe_rouge, "M")

        cart.update_quantity(item.line_id, 0)

        assert len(cart) == 0

    def test_update_unknown_line(self, robe_rouge):
        cart = Cart()
        cart.add(robe_rouge, "M")
        cart.update_quantity("missing", 3)
        assert cart.total_items == 1

    def test_remove_and_clear(self, robe_rouge, robe_bleu):
        cart = Cart()
        first = cart.add(robe_rouge, "M")
        cart.add(robe_bleu, "M")

        cart.remove(first.line_id)
        assert [item.product.slug for item in cart] == ["robe-soir-bleu"]

        cart.clear()
        assert cart.total_items == 0
        assert cart.subtotal == 0


class TestPersistence:
    def test_json_round_trip(self, robe_rouge):
        cart = Cart()
        cart.add(robe_rouge, "M", quantity=3)

        restored = Cart.from_json(cart.to_json())

        assert len(restored) == 1
        item = restored.items[0]
        assert item.product.slug == "robe-soir-rouge"
        assert item.selected_size == "M"
        assert item.quantity == 3

    def test_invalid_json(self):
        assert len(Cart.from_json("{not json")) == 0

    def test_empty_or_non_list(self):
        assert len(Cart.from_json("")) == 0
        assert len(Cart.from_json(None)) == 0
        assert len(Cart.from_json('{"items": []}')) == 0

    def test_malformed_lines_skipped(self, robe_rouge):
        cart = Cart()
        cart.add(robe_rouge, "M")
        good = json.loads(cart.to_json())[0]
        raw = json.dumps([
            good,
            "oops",
            {"product": {"name": "No id"}},
            {**good, "quantity": -4, "line_id": None, "selected_size": "L"},
        ])

        restored = Cart.from_json(raw)

        assert [item.line_id for item in restored] == ["id-robe-soir-rouge::m", "id-robe-soir-rouge::l"]
        assert restored.items[1].quantity == 1

    def test_duplicate_lines_merged(self, robe_rouge):
        cart = Cart()
        cart.add(robe_rouge, "M", quantity=2)
        line = json.loads(cart.to_json())[0]

        restored = Cart.from_json(json.dumps([line, line]))

        assert len(restored) == 1
        assert restored.total_items == 4

    def test_save_and_load(self, tmp_path, robe_rouge):
        path = tmp_path / "cart.json"
        cart = Cart()
        cart.add(robe_rouge, "M")

        cart.save(path)

        assert Cart.load(path).total_items == 1

    def test_load_missing_file(self, tmp_path):
        assert len(Cart.load(tmp_path / "missing.json")) == 0
