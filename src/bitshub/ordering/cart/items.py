"""Cart item management — commands and handler."""

from protean.fields import Identifier, Integer, ValueObject
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.catalogue.product import ProductSnapshot
from bitshub.domain import bitshub, logger
from bitshub.ordering.cart.cart import SESSION_CART_ID, Cart


@bitshub.command(part_of="Cart")
class AddToCart:
    """Add one unit of a product to the cart."""

    product = ValueObject(ProductSnapshot, required=True)


@bitshub.command(part_of="Cart")
class UpdateCartQuantity:
    """Set an item's quantity; zero removes it."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@bitshub.command(part_of="Cart")
class RemoveFromCart:
    product_id = Identifier(required=True)


@bitshub.command(part_of="Cart")
class ClearCart:
    pass


@bitshub.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(SESSION_CART_ID)
        item = cart.add_item(command.product)
        repo.add(cart)
        logger.debug("Added to cart", product_id=command.product.id, quantity=item.quantity)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(SESSION_CART_ID)
        cart.update_item_quantity(command.product_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(SESSION_CART_ID)
        cart.remove_item(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(SESSION_CART_ID)
        cart.clear()
        repo.add(cart)
