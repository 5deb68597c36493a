"""Application tests for the checkout workflow (PlaceOrder)."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.cart.items import AddToCart
from storefront.cart.queries import cart_lines
from storefront.catalogue.management import RemoveProduct
from storefront.catalogue.product import Product
from storefront.discount.discount import Discount, InvalidDiscountError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder


def _process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def stocked_cart(add_product):
    """The reference cart: 2 x 1.50 and 3 x 0.50."""
    apples = add_product(name="Apples", price=1.50, stock=10)
    bananas = add_product(name="Bananas", price=0.50, stock=2)
    _process(AddToCart(user_id="user-1", product_id=apples, quantity=2))
    _process(AddToCart(user_id="user-1", product_id=bananas, quantity=3))
    return {"apples": apples, "bananas": bananas}


def _place(**overrides):
    values = {"user_id": "user-1", "user_name": "Jane", "address": "1 Orchard Lane"}
    values.update(overrides)
    return _process(PlaceOrder(**values))


class TestPlaceOrderFromCart:
    def test_total_without_discount(self, stocked_cart):
        order = current_domain.repository_for(Order).get(_place())
        assert order.total_amount == 4.50
        assert len(order.items) == 2

    def test_total_with_save10(self, stocked_cart, add_discount):
        add_discount(code="SAVE10", percentage=10)
        order = current_domain.repository_for(Order).get(_place(discount_code="save10"))
        assert order.total_amount == 4.05
        assert order.discount_code == "SAVE10"
        assert order.discount_percentage == 10

    def test_cart_is_cleared(self, stocked_cart):
        _place()
        assert cart_lines("user-1") == []

    def test_stock_is_decremented_and_floored(self, stocked_cart):
        _place()
        repo = current_domain.repository_for(Product)
        assert repo.get(stocked_cart["apples"]).stock == 8
        assert repo.get(stocked_cart["bananas"]).stock == 0

    def test_snapshot_survives_catalogue_edits(self, stocked_cart):
        order_id = _place()
        product = current_domain.repository_for(Product).get(stocked_cart["apples"])
        product.update_details(name="Green Apples", price=9.99)
        current_domain.repository_for(Product).add(product)

        order = current_domain.repository_for(Order).get(order_id)
        apples = next(i for i in order.items if str(i.product_id) == stocked_cart["apples"])
        assert apples.name == "Apples"
        assert apples.price == 1.50

    def test_empty_cart_is_rejected(self):
        with pytest.raises(ValidationError):
            _place()
        assert current_domain.repository_for(Order)._dao.query.all().items == []


def _client_items(*lines):
    return json.dumps(
        [{"product_id": pid, "name": name, "price": price, "quantity": qty} for pid, name, price, qty in lines]
    )


class TestPlaceOrderWithItems:
    def test_matching_client_items_are_accepted(self, stocked_cart):
        items = _client_items(
            (stocked_cart["apples"], "Apples", 1.50, 2),
            (stocked_cart["bananas"], "Bananas", 0.50, 3),
        )
        order = current_domain.repository_for(Order).get(_place(items=items, total_amount=4.50))
        assert order.total_amount == 4.50
        assert cart_lines("user-1") == []

    def test_client_items_without_a_cart_are_rejected(self, add_product):
        product_id = add_product(name="Hamper", price=10.00, stock=5)
        items = _client_items((product_id, "Hamper", 0.01, 5))

        with pytest.raises(ValidationError):
            _place(items=items, total_amount=0.05)

        assert current_domain.repository_for(Product).get(product_id).stock == 5
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_client_price_must_match_catalogue(self, stocked_cart):
        items = _client_items(
            (stocked_cart["apples"], "Apples", 0.01, 2),
            (stocked_cart["bananas"], "Bananas", 0.50, 3),
        )
        with pytest.raises(ValidationError) as exc:
            _place(items=items)

        assert exc.value.messages["items"] == ["The price of Apples has changed to 1.50"]
        assert len(cart_lines("user-1")) == 2
        assert current_domain.repository_for(Product).get(stocked_cart["apples"]).stock == 10

    def test_client_quantity_must_match_cart(self, stocked_cart):
        items = _client_items(
            (stocked_cart["apples"], "Apples", 1.50, 1),
            (stocked_cart["bananas"], "Bananas", 0.50, 3),
        )
        with pytest.raises(ValidationError) as exc:
            _place(items=items)
        assert "do not match your cart" in exc.value.messages["items"][0]

    def test_client_items_missing_a_cart_line(self, stocked_cart):
        with pytest.raises(ValidationError):
            _place(items=_client_items((stocked_cart["apples"], "Apples", 1.50, 2)))
        assert len(cart_lines("user-1")) == 2

    def test_unknown_product_in_client_items(self, stocked_cart):
        items = _client_items(
            (stocked_cart["apples"], "Apples", 1.50, 2),
            (stocked_cart["bananas"], "Bananas", 0.50, 3),
            ("gone", "Ghost", 1.00, 1),
        )
        with pytest.raises(ValidationError):
            _place(items=items)

    def test_duplicate_client_line(self, stocked_cart):
        items = _client_items(
            (stocked_cart["apples"], "Apples", 1.50, 2),
            (stocked_cart["apples"], "Apples", 1.50, 2),
        )
        with pytest.raises(ValidationError):
            _place(items=items)

    def test_total_mismatch_is_rejected(self, stocked_cart):
        with pytest.raises(ValidationError) as exc:
            _place(total_amount=4.00)
        assert "total_amount" in exc.value.messages
        assert len(cart_lines("user-1")) == 2

    def test_total_within_a_cent_is_accepted(self, stocked_cart):
        assert _place(total_amount=4.51)

    def test_malformed_items(self, stocked_cart):
        with pytest.raises(ValidationError) as exc:
            _place(items="not json")
        assert exc.value.messages["items"] == ["Items must be a JSON list"]

    def test_empty_items_list_is_rejected(self, stocked_cart):
        with pytest.raises(ValidationError):
            _place(items="[]")


class TestDiscountUsage:
    def test_placement_increments_usage_exactly_once(self, stocked_cart, add_discount):
        discount_id = add_discount(code="SAVE10", usage_limit=5)
        _place(discount_code="SAVE10")
        assert current_domain.repository_for(Discount).get(discount_id).used_count == 1

    def test_exhausted_code_fails_and_leaves_cart_untouched(self, stocked_cart, add_discount):
        discount_id = add_discount(code="ONCE", usage_limit=1)
        _place(discount_code="ONCE")

        # Refill the cart and try again with the spent code
        _process(AddToCart(user_id="user-1", product_id=stocked_cart["apples"], quantity=1))
        with pytest.raises(InvalidDiscountError):
            _place(discount_code="ONCE")

        assert len(cart_lines("user-1")) == 1
        assert current_domain.repository_for(Discount).get(discount_id).used_count == 1
        assert len(current_domain.repository_for(Order)._dao.query.all().items) == 1

    def test_unknown_code_fails(self, stocked_cart):
        with pytest.raises(InvalidDiscountError):
            _place(discount_code="NOPE")
        assert len(cart_lines("user-1")) == 2


class TestOrphanedLinesAtCheckout:
    def test_deleted_products_are_not_ordered(self, stocked_cart):
        _process(RemoveProduct(product_id=stocked_cart["bananas"]))
        order = current_domain.repository_for(Order).get(_place())
        assert [i.name for i in order.items] == ["Apples"]
        assert order.total_amount == 3.00
