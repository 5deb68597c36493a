"""Read helpers for carts: lookup by user and the catalogue join."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import CartItem, ShoppingCart
from storefront.catalogue.product import Product
from storefront.order.pricing import subtotal


@dataclass
class CartLine:
    item: CartItem
    product: Product

    @property
    def line_total(self) -> float:
        return subtotal([(self.product.price, self.item.quantity)])


def cart_for_user(user_id):
    """Return the user's cart, or ``None`` when nothing was ever added."""
    repo = current_domain.repository_for(ShoppingCart)
    carts = repo._dao.query.filter(user_id=str(user_id)).all().items
    return carts[0] if carts else None


def cart_lines(user_id):
    """Cart lines joined with their products.

    Lines whose product no longer exists are skipped; they are not deleted here.
    Deleting a product cascades to carts, and ``PurgeOrphanedCartItems`` sweeps
    anything that slipped through.
    """
    cart = cart_for_user(user_id)
    if cart is None:
        return []

    product_repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        try:
            product = product_repo.get(str(item.product_id))
        except ObjectNotFoundError:
            continue
        lines.append(CartLine(item=item, product=product))
    return lines
