"""Domain events for catalogue aggregates."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A grocery item was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    category = String(sanitize=False)
    price = Float(required=True)
    stock = Integer(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    category = String(sanitize=False)
    price = Float(required=True)
    stock = Integer(required=True)


@storefront.event(part_of="Product")
class StockDecremented:
    """Stock was reduced after an order was placed. Never drops below zero."""

    __version__ = 1

    product_id = Identifier(required=True)
    requested = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
