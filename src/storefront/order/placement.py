"""Order placement: the checkout workflow.

One command, one unit of work:

1. snapshot the user's cart joined with the current catalogue; line items sent
   by the client are only compared against that snapshot,
2. resolve the discount code, if any, and compute the total,
3. persist the confirmed order,
4. redeem the discount code (the single place its usage counter moves),
5. clear the cart,
6. decrement stock best-effort.

Any failure before the unit of work commits leaves the cart, the discount and
the catalogue untouched; the client simply re-submits.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.queries import cart_for_user, cart_lines
from storefront.catalogue.product import Product
from storefront.discount.discount import Discount
from storefront.discount.management import valid_discount
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.pricing import amounts_match

logger = structlog.get_logger(__name__)

MISMATCH_MESSAGE = "Order items do not match your cart; please review your cart and try again"


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    user_name = String(required=True, max_length=100, sanitize=False)
    address = Text(required=True, sanitize=False)
    items = Text(sanitize=False)  # JSON: list of {product_id, name, price, quantity} as the client saw the cart
    total_amount = Float()  # Client-computed total, checked against the server's
    discount_code = String(max_length=50, sanitize=False)


def snapshot_cart(user_id):
    """Copy the user's cart lines with the current product name and price."""
    return [
        {
            "product_id": str(line.product.id),
            "name": line.product.name,
            "price": line.product.price,
            "quantity": line.item.quantity,
        }
        for line in cart_lines(user_id)
    ]


def _parse_items(raw):
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from None
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValidationError({"items": ["Items must be a list of line items"]})
    return items


def check_client_items(client_items, snapshot):
    """Reject client line items that disagree with the server snapshot.

    Product ids and quantities must match the cart exactly; a supplied price
    must match the catalogue price to the cent.
    """
    expected = {line["product_id"]: line for line in snapshot}
    seen = set()
    for item in client_items:
        product_id = str(item.get("product_id") or "")
        line = expected.get(product_id)
        if line is None or product_id in seen or item.get("quantity") != line["quantity"]:
            raise ValidationError({"items": [MISMATCH_MESSAGE]})
        seen.add(product_id)

        price = item.get("price")
        if price is not None and not amounts_match(price, line["price"]):
            raise ValidationError({"items": [f"The price of {line['name']} has changed to {line['price']:.2f}"]})

    if seen != set(expected):
        raise ValidationError({"items": [MISMATCH_MESSAGE]})


def _decrement_stock(order):
    repo = current_domain.repository_for(Product)
    for item in order.items:
        try:
            product = repo.get(str(item.product_id))
        except ObjectNotFoundError:
            logger.warning("Skipped stock update for missing product", product_id=str(item.product_id))
            continue
        product.decrement_stock(item.quantity)
        repo.add(product)
        logger.debug("Stock decremented", product_id=str(product.id), quantity=item.quantity, stock=product.stock)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = snapshot_cart(command.user_id)
        if items and command.items:
            check_client_items(_parse_items(command.items), items)

        discount = valid_discount(command.discount_code) if command.discount_code else None

        order = Order.place(
            user_id=command.user_id,
            user_name=command.user_name,
            address=command.address,
            items_data=items,
            discount_code=discount.code if discount else None,
            discount_percentage=discount.percentage if discount else 0.0,
        )

        if command.total_amount is not None and not amounts_match(command.total_amount, order.total_amount):
            raise ValidationError(
                {"total_amount": [f"Order total {command.total_amount:.2f} does not match {order.total_amount:.2f}"]}
            )

        current_domain.repository_for(Order).add(order)

        if discount:
            discount.redeem(order_id=order.id)
            current_domain.repository_for(Discount).add(discount)
            logger.info("Discount redeemed", code=discount.code, used_count=discount.used_count, order_id=str(order.id))

        cart = cart_for_user(command.user_id)
        if cart is not None and cart.items:
            cart.clear()
            current_domain.repository_for(ShoppingCart).add(cart)

        _decrement_stock(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            item_count=len(order.items),
            total_amount=order.total_amount,
            discount_code=order.discount_code,
        )
        return str(order.id)
