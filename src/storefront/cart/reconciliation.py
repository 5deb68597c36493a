"""Referential integrity between carts and the catalogue.

``remove_product_from_carts`` is the cascade run when a product is deleted.
``PurgeOrphanedCartItems`` is the reconciliation pass for lines that still
point at products which no longer exist.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


def remove_product_from_carts(product_id):
    """Drop ``product_id`` from every cart. Returns the number of lines removed."""
    repo = current_domain.repository_for(ShoppingCart)
    removed = 0
    for cart in repo._dao.query.all().items:
        if cart.remove_item(product_id):
            repo.add(cart)
            removed += 1
    return removed


@storefront.command(part_of="ShoppingCart")
class PurgeOrphanedCartItems:
    """Remove cart lines whose product has been deleted."""

    requested_by = String(max_length=255, sanitize=False)


@storefront.command_handler(part_of=ShoppingCart)
class CartReconciliationHandler:
    @handle(PurgeOrphanedCartItems)
    def purge_orphaned_items(self, command):
        product_ids = {str(p.id) for p in current_domain.repository_for(Product)._dao.query.all().items}
        repo = current_domain.repository_for(ShoppingCart)

        purged = 0
        for cart in repo._dao.query.all().items:
            orphans = [str(i.product_id) for i in cart.items if str(i.product_id) not in product_ids]
            if not orphans:
                continue
            for product_id in orphans:
                cart.remove_item(product_id)
            repo.add(cart)
            purged += len(orphans)
            logger.info("Purged orphaned cart items", cart_id=str(cart.id), product_ids=orphans)

        logger.info("Cart reconciliation complete", purged=purged)
        return purged
