"""
Unit tests for cart commands and the cart store
"""
import pytest

from cart.commands import (
    AddItem, ApplyPromo, Clear, RemoveItem, RemovePromo, SetRegion,
    UpdateQuantity, apply_command,
)
from cart.config import Config
from cart.models import AppliedPromoCode, CartState, Product
from cart.regions import UnknownRegionError, get_region
from cart.store import CartStore


@pytest.fixture
def hoodie():
    return Product(
        id="prod-1",
        name="Oversized Hoodie",
        price=500,
        images=["https://cdn.example.com/hoodie-front.jpg", "https://cdn.example.com/hoodie-back.jpg"],
        sizes=["M", "L"],
        colors=["black", "white"],
    )


@pytest.fixture
def promo():
    return AppliedPromoCode(code_id="abc123", code="summer20", discount_percentage=20, discount_amount=200)


@pytest.fixture
def store():
    return CartStore(config=Config())


class TestApplyCommand:
    """Test the pure cart state transition"""

    def test_add_new_item(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 2))

        assert len(state.items) == 1
        item = state.items[0]
        assert item.key == ("prod-1", "L", "black")
        assert item.name == "Oversized Hoodie"
        assert item.unit_price == 500
        assert item.quantity == 2
        assert item.image == "https://cdn.example.com/hoodie-front.jpg"

    def test_add_defaults_to_quantity_one(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black"))
        assert state.items[0].quantity == 1

    def test_add_same_key_merges_quantities(self, hoodie):
        state = CartState()
        for qty in (1, 3, 2):
            state = apply_command(state, AddItem(hoodie, "L", "black", qty))

        assert len(state.items) == 1
        assert state.items[0].quantity == 6

    def test_merge_keeps_first_name_and_price(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 1))
        repriced = hoodie.model_copy(update={"name": "Hoodie v2", "price": 650})
        state = apply_command(state, AddItem(repriced, "L", "black", 1))

        assert state.items[0].quantity == 2
        assert state.items[0].name == "Oversized Hoodie"
        assert state.items[0].unit_price == 500

    def test_different_size_or_color_is_separate_item(self, hoodie):
        state = CartState()
        state = apply_command(state, AddItem(hoodie, "L", "black"))
        state = apply_command(state, AddItem(hoodie, "M", "black"))
        state = apply_command(state, AddItem(hoodie, "L", "white"))

        assert len(state.items) == 3
        assert [i.key for i in state.items] == [
            ("prod-1", "L", "black"),
            ("prod-1", "M", "black"),
            ("prod-1", "L", "white"),
        ]

    def test_image_falls_back_to_thumbnail(self):
        product = Product(id="p2", name="Cap", price=150, thumbnail="https://cdn.example.com/cap-thumb.jpg")
        state = apply_command(CartState(), AddItem(product, None, "red"))
        assert state.items[0].image == "https://cdn.example.com/cap-thumb.jpg"

    def test_image_none_without_images_or_thumbnail(self):
        product = Product(id="p3", name="Socks", price=50)
        state = apply_command(CartState(), AddItem(product, "M", "grey"))
        assert state.items[0].image is None

    def test_input_state_is_not_modified(self, hoodie):
        original = apply_command(CartState(), AddItem(hoodie, "L", "black", 1))
        apply_command(original, AddItem(hoodie, "L", "black", 4))
        apply_command(original, Clear())

        assert original.items[0].quantity == 1

    def test_remove_item(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black"))
        state = apply_command(state, AddItem(hoodie, "M", "black"))
        state = apply_command(state, RemoveItem("prod-1", "L", "black"))

        assert [i.key for i in state.items] == [("prod-1", "M", "black")]

    def test_remove_absent_item_is_noop(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 2))
        after = apply_command(state, RemoveItem("prod-1", "XL", "black"))
        assert after == state

    def test_update_quantity_replaces(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 2))
        state = apply_command(state, UpdateQuantity("prod-1", "L", "black", 5))
        assert state.items[0].quantity == 5

    @pytest.mark.parametrize("quantity", [0, -1, -10])
    def test_update_quantity_non_positive_removes(self, hoodie, quantity):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 2))
        state = apply_command(state, UpdateQuantity("prod-1", "L", "black", quantity))
        assert state.is_empty

    def test_update_quantity_absent_item_is_noop(self, hoodie):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 2))
        after = apply_command(state, UpdateQuantity("prod-9", "L", "black", 3))
        assert after == state

    def test_region_and_promo_setters_are_independent(self, promo):
        suez = get_region("Suez")
        state = apply_command(CartState(), ApplyPromo(promo))
        state = apply_command(state, SetRegion(suez))

        assert state.region == suez
        assert state.applied_promo_code == promo

        state = apply_command(state, RemovePromo())
        assert state.applied_promo_code is None
        assert state.region == suez

    def test_clear_resets_everything(self, hoodie, promo):
        state = apply_command(CartState(), AddItem(hoodie, "L", "black", 2))
        state = apply_command(state, SetRegion(get_region("Cairo")))
        state = apply_command(state, ApplyPromo(promo))
        state = apply_command(state, Clear())

        assert state == CartState()

    def test_unknown_command_raises(self):
        with pytest.raises(TypeError):
            apply_command(CartState(), "ADD_TO_CART")


class TestAppliedPromoCode:

    def test_code_is_normalized(self, promo):
        assert promo.code == "SUMMER20"


class TestCartStore:
    """Test the session cart store"""

    def test_starts_empty(self, store):
        assert store.state.is_empty
        assert store.state.region is None
        assert store.state.applied_promo_code is None

    def test_add_and_total_items(self, store, hoodie):
        store.add_item(hoodie, "L", "black", 2)
        store.add_item(hoodie, "M", "white")

        assert len(store.state.items) == 2
        assert store.state.total_items == 3

    def test_update_and_remove(self, store, hoodie):
        store.add_item(hoodie, "L", "black", 2)
        store.update_quantity("prod-1", "L", "black", 7)
        assert store.state.items[0].quantity == 7

        store.remove_item("prod-1", "L", "black")
        assert store.state.is_empty

    def test_set_region_by_name(self, store):
        store.set_region_by_name("suez")
        assert store.state.region.name == "Suez"

    def test_set_region_by_unknown_name_raises(self, store):
        with pytest.raises(UnknownRegionError):
            store.set_region_by_name("Atlantis")
        assert store.state.region is None

    def test_promo_apply_and_remove(self, store, promo):
        store.apply_promo_code(promo)
        assert store.state.applied_promo_code.code_id == "abc123"

        store.remove_promo_code()
        assert store.state.applied_promo_code is None

    def test_clear(self, store, hoodie, promo):
        store.add_item(hoodie, "L", "black", 2)
        store.set_region_by_name("Cairo")
        store.apply_promo_code(promo)

        store.clear()

        assert store.state == CartState()

    def test_pricing_is_idempotent(self, store, hoodie):
        store.add_item(hoodie, "L", "black", 2)
        store.set_region_by_name("Suez")

        assert store.pricing() == store.pricing()

    def test_pricing_follows_mutations(self, store, hoodie):
        store.add_item(hoodie, "L", "black", 2)
        assert store.pricing().subtotal == 1000

        store.update_quantity("prod-1", "L", "black", 3)
        assert store.pricing().subtotal == 1500
