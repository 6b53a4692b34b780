"""Catalogue management — commands and handler.

Administrative edits to the product list. Who may issue them is decided by
the UI; the core does not check the session.
"""

from protean.fields import Identifier, ValueObject
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.catalogue.product import Product, ProductSnapshot
from bitshub.domain import bitshub, logger


@bitshub.command(part_of="Product")
class AddProduct:
    """List a new product. Id collisions with existing products are not checked."""

    product = ValueObject(ProductSnapshot, required=True)


@bitshub.command(part_of="Product")
class UpdateProduct:
    """Replace every listing that has the same id."""

    product = ValueObject(ProductSnapshot, required=True)


@bitshub.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@bitshub.command_handler(part_of=Product)
class ManageCatalogueHandler:
    @handle(AddProduct)
    def add_product(self, command):
        repo = current_domain.repository_for(Product)
        repo.add(Product.from_snapshot(command.product))
        logger.info("Product added", product_id=command.product.id, name=command.product.name)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        for product in repo.query.filter(id=command.product.id).limit(None).all().items:
            product.revise(command.product)
            repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        for product in repo.query.filter(id=command.product_id).limit(None).all().items:
            repo._dao.delete(product)
