"""Application tests for catalogue management and browsing intents."""

from bitshub.catalogue.management import AddProduct, DeleteProduct, UpdateProduct
from bitshub.catalogue.product import ProductSnapshot
from bitshub.catalogue.search import SelectCategory, SetSearchQuery
from bitshub.storage.slices import record_of


def _make_product(product_id="p-100", **overrides):
    data = {
        "id": product_id,
        "name": "USB-C Dock",
        "price": 120.0,
        "category": "accessories",
        "description": "Twelve ports",
    }
    data.update(overrides)
    return ProductSnapshot(**data)


class TestAddProduct:
    def test_add_appends_product(self, storefront):
        state = storefront.dispatch(AddProduct(product=_make_product()))
        assert state.products[-1].id == "p-100"
        assert len(state.products) == 8

    def test_add_with_existing_id_is_not_rejected(self, storefront):
        state = storefront.dispatch(AddProduct(product=_make_product("1", name="Duplicate")))

        assert [p.id for p in state.products].count("1") == 2
        assert not state.ui.errors

    def test_previous_snapshot_is_untouched(self, storefront):
        before = storefront.state
        storefront.dispatch(AddProduct(product=_make_product()))
        assert len(before.products) == 7


class TestUpdateProduct:
    def test_update_replaces_matching_product(self, storefront):
        state = storefront.dispatch(UpdateProduct(product=_make_product("2", name="Renamed", price=10.0)))

        product = state.find_product("2")
        assert product.name == "Renamed"
        assert product.price == 10.0
        assert len(state.products) == 7

    def test_update_keeps_catalogue_order(self, storefront):
        before = [p.id for p in storefront.state.products]
        state = storefront.dispatch(UpdateProduct(product=_make_product("4", name="Renamed")))
        assert [p.id for p in state.products] == before

    def test_update_replaces_every_listing_with_the_id(self, storefront):
        storefront.dispatch(AddProduct(product=_make_product("1", name="Duplicate")))
        state = storefront.dispatch(UpdateProduct(product=_make_product("1", name="Both")))

        assert [p.name for p in state.products if p.id == "1"] == ["Both", "Both"]

    def test_update_unknown_id_changes_nothing(self, storefront):
        before = [record_of(p) for p in storefront.state.products]
        state = storefront.dispatch(UpdateProduct(product=_make_product("missing")))
        assert [record_of(p) for p in state.products] == before

    def test_cart_keeps_its_snapshot_after_update(self, storefront):
        from bitshub.ordering.cart.items import AddToCart

        original = storefront.state.find_product("3").snapshot()
        storefront.dispatch(AddToCart(product=original))
        state = storefront.dispatch(UpdateProduct(product=original.replace(price=1.0)))

        assert state.cart.items[0].product.price == original.price


class TestDeleteProduct:
    def test_delete_removes_product(self, storefront):
        state = storefront.dispatch(DeleteProduct(product_id="1"))
        assert state.find_product("1") is None
        assert len(state.products) == 6

    def test_delete_unknown_id_is_a_no_op(self, storefront):
        state = storefront.dispatch(DeleteProduct(product_id="missing"))
        assert len(state.products) == 7


class TestBrowsing:
    def test_search_records_query_and_result_ids(self, storefront):
        state = storefront.dispatch(SetSearchQuery(query="macbook"))
        assert state.ui.search_query == "macbook"
        assert state.ui.search_results == ["2"]

    def test_select_category_narrows_visible_products(self, storefront):
        state = storefront.dispatch(SelectCategory(category="headphones"))
        assert state.ui.selected_category == "headphones"
        assert {p.category for p in state.visible_products()} == {"headphones"}

    def test_select_all_shows_everything(self, storefront):
        storefront.dispatch(SelectCategory(category="laptops"))
        state = storefront.dispatch(SelectCategory(category="all"))
        assert len(state.visible_products()) == 7
