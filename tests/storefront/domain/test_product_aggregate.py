import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import ProductAdded, StockDecremented
from storefront.catalogue.product import DEFAULT_PRODUCT_IMAGE, Product


def _product(**overrides):
    values = {"name": "Apples", "price": 1.5, "category": "Fruits", "stock": 5}
    values.update(overrides)
    return Product.add(**values)


class TestProductAdd:
    def test_add(self):
        product = _product()
        assert product.name == "Apples"
        assert product.image == DEFAULT_PRODUCT_IMAGE
        assert isinstance(product._events[0], ProductAdded)

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(price=-1)

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(stock=-1)


class TestUpdateDetails:
    def test_partial_update(self):
        product = _product()
        product.update_details(price=2.0)
        assert product.price == 2.0
        assert product.name == "Apples"

    def test_negative_price_is_rejected(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.update_details(price=-0.5)


class TestDecrementStock:
    def test_decrement(self):
        product = _product(stock=5)
        product.decrement_stock(2)
        assert product.stock == 3

    def test_floors_at_zero(self):
        product = _product(stock=2)
        product.decrement_stock(5)
        assert product.stock == 0

        event = product._events[-1]
        assert isinstance(event, StockDecremented)
        assert event.requested == 5
        assert event.previous_stock == 2
        assert event.new_stock == 0


class TestPlainTextFields:
    def test_ampersand_is_stored_verbatim(self):
        product = _product(name="Salt & Vinegar Crisps", description="<b>Crunchy</b> & tangy")
        assert product.name == "Salt & Vinegar Crisps"
        assert product.description == "<b>Crunchy</b> & tangy"
