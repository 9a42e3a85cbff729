import json
from decimal import Decimal

import pytest

from petite_treats.storefront.cart import CART_KEY, CartManager, CartView, parse_quantity
from petite_treats.storefront.session import InMemorySessionStore, JsonFileSessionStore


def _stored(session_store):
    return json.loads(session_store.get(CART_KEY))


class TestParseQuantity:
    @pytest.mark.parametrize("value, expected", [(1, 1), ("10", 10), (" 3 ", 3)])
    def test_valid(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize("value", [0, 11, -1, "", "two", "2.5", None, True])
    def test_invalid(self, value):
        assert parse_quantity(value) is None


class TestCartManager:
    def test_missing_key_is_an_empty_cart(self, cart):
        assert cart.load() == []

    def test_add_creates_one_entry_per_unit(self, cart, session_store):
        assert cart.add("Cake", "cake", 10, 3, "Chocolate", "Plain") is True
        stored = _stored(session_store)
        assert len(stored) == 1
        assert stored[0]["name"] == "Cake"
        assert stored[0]["customizations"] == [{"flavor": "Chocolate", "box": "Plain"}] * 3

    def test_same_product_merges_into_one_line_item(self, cart):
        cart.add("Brownies", "brownies", 2, 1, "Chocolate", "Bow")
        cart.add("Brownies", "brownies", 2, 1, "Caramel", "Plain")
        items = cart.load()
        assert len(items) == 1
        assert items[0].quantity == 2
        assert [c.flavor for c in items[0].customizations] == ["Chocolate", "Caramel"]

    def test_different_products_get_separate_line_items(self, cart):
        cart.add("Brownies", "brownies", 2, 1, "Chocolate", "Bow")
        cart.add("Cake", "cake", 10, 1, "Chocolate", "Bow")
        assert [i.slug for i in cart.load()] == ["brownies", "cake"]

    def test_merged_line_item_moves_to_the_end(self, cart):
        cart.add("Brownies", "brownies", 2, 1, "Chocolate", "Bow")
        cart.add("Cake", "cake", 10, 1, "Chocolate", "Bow")
        cart.add("Brownies", "brownies", 2, 2, "Caramel", "Plain")
        items = cart.load()
        assert [i.slug for i in items] == ["cake", "brownies"]
        assert items[1].quantity == 3

    def test_product_without_flavors(self, cart, session_store):
        cart.add("Plain Scone", "plain-scone", 3.5, 1, None, "Bow")
        assert _stored(session_store)[0]["customizations"] == [{"flavor": None, "box": "Bow"}]

    @pytest.mark.parametrize("quantity", [0, 11, "abc", ""])
    def test_invalid_quantity_aborts_silently(self, cart, session_store, quantity):
        assert cart.add("Cake", "cake", 10, quantity, "Chocolate", "Plain") is False
        assert session_store.get(CART_KEY) is None

    def test_remove(self, cart):
        cart.add("Cake", "cake", 10, 1, "Chocolate", "Plain")
        removed = cart.remove("cake")
        assert removed.name == "Cake"
        assert cart.load() == []
        assert cart.remove("cake") is None


class TestCartView:
    @pytest.fixture()
    def view(self, cart):
        cart.add("Cake", "cake", 10, 2, "Chocolate", "Plain")
        cart.add("Brownies", "brownies", 2, 1, "Caramel", "Bow")
        view = CartView(cart)
        view.render()
        return view

    def test_render_lines(self, view):
        assert [line.label for line in view.lines] == ["2 Cake - $20.00", "1 Brownies - $2.00"]
        assert view.lines[1].customizations == ["Flavor: Caramel\nBox Decoration: Bow"]

    def test_render_without_flavor(self, cart):
        cart.add("Plain Scone", "plain-scone", 3.5, 2, None, "Ribbon")
        view = CartView(cart)
        view.render()
        assert view.lines[0].customizations == ["Box Decoration: Ribbon"] * 2

    def test_running_count_and_total(self, view):
        assert view.count == 3
        assert view.total_text == "22.00"

    def test_fractional_prices(self, cart):
        cart.add("Macarons (6 pcs)", "macarons-6-pcs", 10.25, 3, "Rose", "Flower")
        view = CartView(cart)
        view.render()
        assert view.lines[0].label == "3 Macarons (6 pcs) - $30.75"
        assert view.total == Decimal("30.75")

    def test_remove_subtracts_exactly_the_line(self, view, session_store):
        assert view.remove("cake") is True
        assert view.count == 1
        assert view.total_text == "2.00"
        assert [line.slug for line in view.lines] == ["brownies"]
        assert [item["slug"] for item in _stored(session_store)] == ["brownies"]

    def test_remove_unknown_line(self, view):
        assert view.remove("pie") is False
        assert view.count == 3

    def test_clear(self, view, session_store):
        view.clear()
        assert view.count == 0
        assert view.total_text == "0.00"
        assert view.lines == []
        assert _stored(session_store) == []

    def test_clear_on_empty_cart(self, cart):
        view = CartView(cart)
        view.clear()
        assert (view.count, view.total_text) == (0, "0.00")


class TestSessionStores:
    def test_in_memory_remove(self):
        store = InMemorySessionStore({"cart": "[]"})
        store.remove("cart")
        assert store.get("cart") is None

    def test_json_file_store_survives_a_new_instance(self, tmp_path):
        path = tmp_path / "session" / "store.json"
        CartManager(JsonFileSessionStore(path)).add("Pie", "pie", 10, 2, "Pumpkin", "Bow")

        items = CartManager(JsonFileSessionStore(path)).load()
        assert items[0].quantity == 2

    def test_json_file_store_missing_file(self, tmp_path):
        store = JsonFileSessionStore(tmp_path / "absent.json")
        assert store.get("cart") is None
        store.remove("cart")
        assert not (tmp_path / "absent.json").exists()
