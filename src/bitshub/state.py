"""The state tree owned by the storefront, plus read-only selectors.

A ``StoreState`` is a snapshot: the reducer never changes one, it builds the
next. Every slice except ``ui`` is mirrored to local storage.
"""

from dataclasses import dataclass, field

from bitshub.catalogue.product import Product
from bitshub.catalogue.search import filter_products
from bitshub.identity.user import ADMIN_USER_ID, Session, User, admin_user
from bitshub.notifications.notification import Notification
from bitshub.ordering.cart.cart import Cart
from bitshub.ordering.order.order import Order
from bitshub.ui import UiState


@dataclass(frozen=True)
class StoreState:
    products: list[Product] = field(default_factory=list)
    cart: Cart = field(default_factory=Cart.empty)
    users: dict[str, User] = field(default_factory=dict)
    session: Session | None = None
    # Newest first
    orders: list[Order] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    ui: UiState = field(default_factory=UiState)

    @property
    def current_user(self) -> User | None:
        if self.session is None:
            return None
        if self.session.user_id == ADMIN_USER_ID:
            return admin_user(self.session)
        return self.users.get(self.session.user_id)

    def get_order(self, order_id) -> Order | None:
        return next((o for o in self.orders if o.id == order_id), None)

    def find_product(self, product_id) -> Product | None:
        return next((p for p in self.products if p.id == product_id), None)

    def orders_for(self, user_id) -> list[Order]:
        return [o for o in self.orders if o.user_id == user_id]

    def notifications_for(self, user_id) -> list[Notification]:
        return [n for n in self.notifications if n.user_id == user_id]

    def unread_count(self, user_id) -> int:
        return sum(1 for n in self.notifications_for(user_id) if not n.read)

    def visible_products(self) -> list[Product]:
        return filter_products(self.products, self.ui.selected_category, self.ui.search_query)
