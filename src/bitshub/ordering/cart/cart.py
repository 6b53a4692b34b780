"""Shopping Cart, the session's pending selection of products.

There is one cart per session, stored under a fixed id: it is emptied when
an order is placed and when the user logs out. Each item embeds a snapshot of
the product as it was when first added, so later catalogue edits do not
reprice what is already in the cart.
"""

from protean.fields import Integer, List, ValueObject

from bitshub.catalogue.product import ProductSnapshot
from bitshub.domain import bitshub

SESSION_CART_ID = "session"


@bitshub.value_object
class CartItem:
    product = ValueObject(ProductSnapshot, required=True)
    quantity = Integer(required=True, min_value=1)

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


@bitshub.aggregate
class Cart:
    items = List(content_type=ValueObject(CartItem))

    @classmethod
    def empty(cls) -> "Cart":
        return cls(id=SESSION_CART_ID, items=[])

    @property
    def total(self) -> float:
        return sum(item.subtotal for item in self.items)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find(self, product_id) -> CartItem | None:
        return next((i for i in self.items if i.product.id == product_id), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product: ProductSnapshot) -> CartItem:
        """Add one unit of ``product`` (or bump the quantity if already present)."""
        existing = self.find(product.id)
        if existing:
            return self._set_quantity(product.id, existing.quantity + 1)

        item = CartItem(product=product, quantity=1)
        self.items = [*self.items, item]
        return item

    def update_item_quantity(self, product_id, quantity: int) -> None:
        """Set the quantity directly. Zero removes the item."""
        if quantity == 0:
            self.remove_item(product_id)
            return

        if self.find(product_id) is not None:
            self._set_quantity(product_id, quantity)

    def remove_item(self, product_id) -> None:
        self.items = [i for i in self.items if i.product.id != product_id]

    def clear(self) -> None:
        self.items = []

    def _set_quantity(self, product_id, quantity: int) -> CartItem:
        self.items = [i.replace(quantity=quantity) if i.product.id == product_id else i for i in self.items]
        return self.find(product_id)
