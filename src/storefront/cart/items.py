"""Cart item management: commands and handler.

``AddToCart`` increments an existing line; ``SetCartQuantity`` replaces it.
Both create the user's cart on first use.
"""

from protean import handle
from protean.fields import Boolean, Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.queries import cart_for_user
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class SetCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    upsert = Boolean(default=False)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


def _cart_for(user_id):
    return cart_for_user(user_id) or ShoppingCart.create(user_id=str(user_id))


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        # Raises ObjectNotFoundError for unknown products
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = _cart_for(command.user_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return cart.item_for(command.product_id).quantity

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        if command.upsert:
            current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = _cart_for(command.user_id)
        cart.set_item_quantity(
            product_id=command.product_id,
            quantity=command.quantity,
            create=bool(command.upsert),
        )
        repo.add(cart)

        item = cart.item_for(command.product_id)
        return item.quantity if item else 0

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_for_user(command.user_id)
        if cart is None:
            return False

        removed = cart.remove_item(command.product_id)
        current_domain.repository_for(ShoppingCart).add(cart)
        return removed
