"""Tests for the client-side cart."""
import json

import pytest
from hypothesis import given, settings, strategies as st

from medibook.context.cart import CART_STORAGE_KEY, CartContext
from medibook.domain import Medicine


def medicine(medicine_id="m1", price=10.0, stock=3, name="Medicine"):
    return Medicine(id=medicine_id, name=name, price=price, stock=stock)


@pytest.fixture
def storage():
    return {}


@pytest.fixture
def cart(storage):
    return CartContext(storage)


class TestAddItem:

    def test_clamps_to_stock(self, cart):
        """Stock 3 with 2 in the cart: adding 5 ends at 3, not 7."""
        m = medicine(stock=3)
        cart.add_item(m, 2)

        change = cart.add_item(m, 5)

        assert cart.get("m1").quantity == 3
        assert change.quantity == 3
        assert change.clamped

    def test_within_stock_not_clamped(self, cart):
        change = cart.add_item(medicine(stock=10), 4)

        assert change.quantity == 4
        assert not change.clamped

    def test_new_item_clamped_on_insert(self, cart):
        change = cart.add_item(medicine(stock=2), 9)

        assert change.quantity == 2
        assert change.clamped

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_is_noop(self, cart, storage, quantity):
        change = cart.add_item(medicine(), quantity)

        assert cart.is_empty()
        assert change.quantity == 0
        assert CART_STORAGE_KEY not in storage

    def test_out_of_stock_is_refused(self, cart):
        change = cart.add_item(medicine(stock=0), 1)

        assert change.refused
        assert cart.is_empty()

    def test_refreshes_medicine_snapshot(self, cart):
        cart.add_item(medicine(price=10.0, stock=5), 1)

        cart.add_item(medicine(price=12.0, stock=5), 1)

        assert cart.get("m1").medicine.price == 12.0
        assert cart.total == pytest.approx(24.0)


class TestUpdateAndRemove:

    def test_update_to_zero_equals_remove(self, storage):
        updated = CartContext(dict(storage))
        removed = CartContext(dict(storage))
        for c in (updated, removed):
            c.add_item(medicine("a"), 2)
            c.add_item(medicine("b"), 1)

        updated.update_quantity("a", 0)
        removed.remove_item("a")

        assert [(i.medicine.id, i.quantity) for i in updated.items] == [
            (i.medicine.id, i.quantity) for i in removed.items
        ]

    def test_update_clamps_to_stock(self, cart):
        cart.add_item(medicine(stock=3), 1)

        change = cart.update_quantity("m1", 10)

        assert cart.get("m1").quantity == 3
        assert change.clamped

    def test_update_unknown_is_noop(self, cart):
        change = cart.update_quantity("missing", 2)

        assert change.quantity == 0
        assert cart.is_empty()

    def test_remove_missing_is_noop(self, cart):
        cart.add_item(medicine(), 1)

        cart.remove_item("missing")

        assert cart.item_count == 1

    def test_clear(self, cart):
        cart.add_item(medicine("a"), 1)
        cart.add_item(medicine("b"), 2)

        cart.clear()

        assert cart.is_empty()
        assert cart.total == 0


class TestPersistence:

    def test_survives_reload(self, storage):
        CartContext(storage).add_item(medicine(price=2.5, stock=10), 4)

        reloaded = CartContext(storage)

        assert reloaded.item_count == 4
        assert reloaded.total == pytest.approx(10.0)
        assert reloaded.get("m1").medicine.stock == 10

    def test_every_mutation_is_written(self, cart, storage):
        cart.add_item(medicine(), 2)
        assert json.loads(storage[CART_STORAGE_KEY])[0]["quantity"] == 2

        cart.update_quantity("m1", 1)
        assert json.loads(storage[CART_STORAGE_KEY])[0]["quantity"] == 1

        cart.remove_item("m1")
        assert json.loads(storage[CART_STORAGE_KEY]) == []

    def test_snapshot_drops_free_text(self, cart, storage):
        m = Medicine(id="m1", name="Zinc", price=6.5, stock=4, description="x" * 2000, image="/zinc.png")
        cart.add_item(m, 2)

        [entry] = json.loads(storage[CART_STORAGE_KEY])

        assert entry == {"medicine": {"id": "m1", "name": "Zinc", "price": 6.5, "stock": 4}, "quantity": 2}
        assert CartContext(storage).get("m1").medicine.description is None

    @pytest.mark.parametrize("raw", ["not json", '{"a": 1}', '[{"quantity": 1}]'])
    def test_corrupt_snapshot_starts_empty(self, raw):
        cart = CartContext({CART_STORAGE_KEY: raw})

        assert cart.is_empty()

    def test_listeners_see_persisted_state(self, cart, storage):
        seen = []
        unsubscribe = cart.subscribe(lambda c: seen.append(storage[CART_STORAGE_KEY]))

        cart.add_item(medicine(), 1)
        unsubscribe()
        cart.add_item(medicine(), 1)

        assert len(seen) == 1
        assert json.loads(seen[0])[0]["quantity"] == 1


CATALOGUE = [
    medicine("a", price=1.25, stock=5),
    medicine("b", price=9.99, stock=1),
    medicine("c", price=4.5, stock=20),
    medicine("d", price=3.0, stock=0),
]

operations = st.lists(
    st.tuples(
        st.sampled_from(["add", "update", "remove"]),
        st.sampled_from(CATALOGUE),
        st.integers(min_value=-2, max_value=25),
    ),
    max_size=30,
)


@settings(max_examples=200)
@given(ops=operations)
def test_totals_match_entries(ops):
    """After any sequence of changes, totals are the plain sums over the entries."""
    storage = {}
    cart = CartContext(storage)
    for op, m, quantity in ops:
        if op == "add":
            cart.add_item(m, quantity)
        elif op == "update":
            cart.update_quantity(m.id, quantity)
        else:
            cart.remove_item(m.id)

        for item in cart.items:
            assert 1 <= item.quantity <= item.medicine.stock
        assert cart.total == pytest.approx(sum(i.medicine.price * i.quantity for i in cart.items))
        assert cart.item_count == sum(i.quantity for i in cart.items)

    reloaded = CartContext(storage)
    assert reloaded.item_count == cart.item_count
