"""Application tests for checkout — cart to order through the storefront."""

from bitshub.identity.addresses import AddAddress, SetDefaultAddress
from bitshub.identity.user import Address
from bitshub.ordering.cart.items import AddToCart, UpdateCartQuantity
from bitshub.ordering.order.creation import PlaceOrder
from bitshub.ordering.order.order import OrderStatus
from bitshub.ui import Surface


def _make_address(**overrides):
    data = {
        "name": "Asha Verma",
        "phone": "9876543210",
        "address_line1": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }
    data.update(overrides)
    return Address(**data)


def _fill_cart(storefront):
    laptop = storefront.state.find_product("1")
    mouse = storefront.state.find_product("4")
    storefront.dispatch(AddToCart(product=laptop.snapshot()))
    storefront.dispatch(AddToCart(product=mouse.snapshot()))
    storefront.dispatch(UpdateCartQuantity(product_id="4", quantity=2))
    return laptop.price + 2 * mouse.price


def _add_address(storefront, user_id, **overrides):
    state = storefront.dispatch(AddAddress(user_id=user_id, address=_make_address(**overrides)))
    return state.users[user_id].addresses[-1]


class TestCheckoutPreconditions:
    def test_signed_out_checkout_asks_for_login(self, storefront):
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder())

        assert state.ui.surface == Surface.LOGIN.value
        assert state.orders == []
        assert not state.ui.errors
        assert len(state.cart.items) == 2

    def test_empty_cart_is_rejected(self, storefront, customer):
        _add_address(storefront, customer.id)
        state = storefront.dispatch(PlaceOrder())

        assert state.ui.error == "Your cart is empty"
        assert state.orders == []

    def test_user_without_addresses_is_sent_to_address_form(self, storefront, customer):
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder())

        assert state.ui.surface == Surface.ADDRESS_FORM.value
        assert state.orders == []
        assert len(state.cart.items) == 2

    def test_missing_address_selection_uses_the_default_address(self, storefront, customer):
        _add_address(storefront, customer.id)
        default = _add_address(storefront, customer.id, name="Office", city="Pune")
        storefront.dispatch(SetDefaultAddress(user_id=customer.id, address_id=default.id))
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder())

        assert not state.ui.errors
        assert len(state.orders) == 1
        assert state.orders[0].delivery_address.id == default.id
        assert state.orders[0].delivery_address.city == "Pune"

    def test_first_address_is_the_default_for_checkout(self, storefront, customer):
        address = _add_address(storefront, customer.id)
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder())

        assert state.orders[0].delivery_address.id == address.id

        assert state.ui.errors == {"address_id": ["Please select a delivery address"]}
        assert state.orders == []

    def test_unknown_address_is_rejected(self, storefront, customer):
        _add_address(storefront, customer.id)
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder(address_id="nope"))

        assert state.ui.error == "Address nope not found"
        assert state.orders == []
        assert len(state.cart.items) == 2


class TestPlaceOrder:
    def test_order_is_created_from_cart(self, storefront, customer, clock):
        address = _add_address(storefront, customer.id)
        total = _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder(address_id=address.id))

        assert len(state.orders) == 1
        order = state.orders[0]
        assert order.user_id == customer.id
        assert order.total == total
        assert order.status == OrderStatus.PENDING.value
        assert order.can_cancel is True
        assert order.created_at == clock.now
        assert order.payment_method == "Card"
        assert order.delivery_address.id == address.id
        assert [(i.product.id, i.quantity) for i in order.items] == [("1", 1), ("4", 2)]

    def test_cart_is_cleared_and_history_shown(self, storefront, customer):
        address = _add_address(storefront, customer.id)
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder(address_id=address.id))

        assert state.cart.items == []
        assert state.ui.surface == Surface.PROFILE.value

    def test_newest_order_comes_first(self, storefront, customer, clock):
        address = _add_address(storefront, customer.id)
        _fill_cart(storefront)
        first = storefront.dispatch(PlaceOrder(address_id=address.id)).orders[0]

        clock.advance(hours=1)
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder(address_id=address.id))

        assert [o.id for o in state.orders][1] == first.id
        assert state.orders[0].created_at > first.created_at

    def test_address_form_flow_selects_new_address(self, storefront, customer):
        _fill_cart(storefront)
        storefront.dispatch(PlaceOrder())
        state = storefront.dispatch(AddAddress(user_id=customer.id, address=_make_address()))

        new_address = state.users[customer.id].addresses[0]
        assert state.ui.selected_address_id == new_address.id
        assert state.ui.surface == Surface.CART.value

        state = storefront.dispatch(PlaceOrder())
        assert state.orders[0].delivery_address.id == new_address.id
        assert state.ui.selected_address_id is None

    def test_order_keeps_address_snapshot(self, storefront, customer):
        from bitshub.identity.addresses import UpdateAddress

        address = _add_address(storefront, customer.id)
        _fill_cart(storefront)
        storefront.dispatch(PlaceOrder(address_id=address.id))
        state = storefront.dispatch(
            UpdateAddress(user_id=customer.id, address=address.replace(city="Mysuru"))
        )

        assert state.users[customer.id].addresses[0].city == "Mysuru"
        assert state.orders[0].delivery_address.city == "Bengaluru"

    def test_orders_for_lists_only_that_users_orders(self, storefront, customer):
        address = _add_address(storefront, customer.id)
        _fill_cart(storefront)
        state = storefront.dispatch(PlaceOrder(address_id=address.id))

        assert [o.user_id for o in state.orders_for(customer.id)] == [customer.id]
        assert state.orders_for("someone-else") == []
