"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was confirmed at checkout. Orders are immutable afterwards."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of {product_id, name, price, quantity}
    subtotal = Float(required=True)
    discount_code = String(sanitize=False)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)
