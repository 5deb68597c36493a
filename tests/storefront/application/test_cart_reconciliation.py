"""Cascade on product removal and the orphaned-line reconciliation pass."""

from protean import current_domain
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart
from storefront.cart.queries import cart_for_user, cart_lines
from storefront.cart.reconciliation import PurgeOrphanedCartItems
from storefront.catalogue.management import RemoveProduct
from storefront.catalogue.product import Product


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestRemoveProductCascade:
    def test_product_is_removed_from_every_cart(self, add_product):
        apples = add_product(name="Apples")
        bananas = add_product(name="Bananas")
        for user_id in ("user-1", "user-2"):
            _process(AddToCart(user_id=user_id, product_id=apples, quantity=1))
        _process(AddToCart(user_id="user-1", product_id=bananas, quantity=1))

        removed = _process(RemoveProduct(product_id=apples))

        assert removed == 2
        assert [str(i.product_id) for i in cart_for_user("user-1").items] == [bananas]
        assert cart_for_user("user-2").items == []


class TestOrphanedLines:
    def _orphan(self, add_product):
        """Leave a cart line behind by deleting the product without the cascade."""
        product_id = add_product(name="Apples")
        _process(AddToCart(user_id="user-1", product_id=product_id, quantity=2))

        repo = current_domain.repository_for(Product)
        repo._dao.delete(repo.get(product_id))
        return product_id

    def test_read_path_filters_without_deleting(self, add_product):
        self._orphan(add_product)

        assert cart_lines("user-1") == []
        assert len(cart_for_user("user-1").items) == 1

    def test_reconciliation_purges_orphans(self, add_product):
        orphan_id = self._orphan(add_product)
        keeper = add_product(name="Bananas")
        _process(AddToCart(user_id="user-1", product_id=keeper, quantity=1))

        purged = _process(PurgeOrphanedCartItems(requested_by="admin"))

        assert purged == 1
        cart = current_domain.repository_for(ShoppingCart).get(cart_for_user("user-1").id)
        assert [str(i.product_id) for i in cart.items] == [keeper]
        assert orphan_id not in [str(i.product_id) for i in cart.items]

    def test_reconciliation_with_nothing_to_purge(self, add_product):
        product_id = add_product()
        _process(AddToCart(user_id="user-1", product_id=product_id, quantity=1))
        assert _process(PurgeOrphanedCartItems()) == 0
