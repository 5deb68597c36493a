"""Product management: commands and handler for the admin catalogue screens."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.reconciliation import remove_product_from_carts
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=200, sanitize=False)
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100, sanitize=False)
    stock = Integer(default=0, min_value=0)
    image = String(max_length=500, sanitize=False)
    description = Text(sanitize=False)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=200, sanitize=False)
    price = Float(min_value=0.0)
    category = String(max_length=100, sanitize=False)
    stock = Integer(min_value=0)
    description = Text(sanitize=False)


@storefront.command(part_of="Product")
class ChangeProductImage:
    product_id = Identifier(required=True)
    image = String(required=True, max_length=500, sanitize=False)


@storefront.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            price=command.price,
            category=command.category,
            stock=command.stock,
            image=command.image,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            price=command.price,
            category=command.category,
            stock=command.stock,
            description=command.description,
        )
        repo.add(product)

    @handle(ChangeProductImage)
    def change_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_image(command.image)
        repo.add(product)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        lines_removed = remove_product_from_carts(str(product.id))
        repo._dao.delete(product)

        logger.info("Product removed", product_id=str(product.id), cart_lines_removed=lines_removed)
        return lines_removed
