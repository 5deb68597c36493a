"""Domain events for the Discount aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Discount")
class DiscountCreated:
    __version__ = 1

    discount_id = Identifier(required=True)
    code = String(required=True, sanitize=False)
    percentage = Float(required=True)
    usage_limit = Integer(required=True)


@storefront.event(part_of="Discount")
class DiscountRedeemed:
    """A discount code was consumed by a placed order."""

    __version__ = 1

    discount_id = Identifier(required=True)
    code = String(required=True, sanitize=False)
    order_id = Identifier(required=True)
    used_count = Integer(required=True)
    usage_limit = Integer(required=True)
