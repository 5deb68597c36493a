"""Order aggregate: an immutable record of a confirmed checkout.

Item names and prices are snapshotted at placement time so later catalogue
edits never change a past order. There is no update or cancel path.

Checkout states:
    cart review → discount selected (optional) → submitted → CONFIRMED

``Order.place`` is the submitted → confirmed transition; an order that cannot
be persisted never exists, so ``Confirmed`` is the only stored status.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.order.events import OrderPlaced
from storefront.order.pricing import discounted_total, subtotal


class OrderStatus(Enum):
    CONFIRMED = "Confirmed"


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200, sanitize=False)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    user_name = String(required=True, max_length=100, sanitize=False)
    address = Text(required=True, sanitize=False)
    items = HasMany(OrderItem)
    subtotal = Float(required=True, min_value=0.0)
    discount_code = String(max_length=50, sanitize=False)
    discount_percentage = Float(default=0.0, min_value=0.0, max_value=100.0)
    total_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.CONFIRMED.value, sanitize=False)
    placed_at = DateTime()

    @classmethod
    def place(cls, user_id, user_name, address, items_data, discount_code=None, discount_percentage=0.0):
        """Build a confirmed order from snapshotted line items.

        Args:
            items_data: List of dicts with product_id, name, price, quantity.
        """
        if not items_data:
            raise ValidationError({"items": ["Cannot place an order with an empty cart"]})
        if not (address or "").strip():
            raise ValidationError({"address": ["Delivery address is required"]})

        items = [
            OrderItem(
                product_id=item.get("product_id"),
                name=item.get("name"),
                price=item.get("price"),
                quantity=item.get("quantity"),
            )
            for item in items_data
        ]

        order_subtotal = subtotal((item.price, item.quantity) for item in items)
        percentage = discount_percentage or 0.0
        now = datetime.now(UTC)

        order = cls(
            user_id=user_id,
            user_name=user_name,
            address=address.strip(),
            subtotal=order_subtotal,
            discount_code=discount_code,
            discount_percentage=percentage,
            total_amount=discounted_total(order_subtotal, percentage),
            status=OrderStatus.CONFIRMED.value,
            placed_at=now,
        )

        order.add_items(items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(i.product_id),
                            "name": i.name,
                            "price": i.price,
                            "quantity": i.quantity,
                        }
                        for i in items
                    ]
                ),
                subtotal=order.subtotal,
                discount_code=discount_code,
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order
