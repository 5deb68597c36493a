"""Product aggregate: a grocery item on sale.

Stock is advisory: it is decremented after an order is placed but orders are
never refused for lack of stock.
"""

from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String, Text

from storefront.catalogue.events import ProductAdded, ProductDetailsUpdated, StockDecremented
from storefront.domain import storefront

DEFAULT_PRODUCT_IMAGE = "/images/placeholder.png"


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200, sanitize=False)
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100, sanitize=False)
    stock = Integer(default=0, min_value=0)
    image = String(max_length=500, default=DEFAULT_PRODUCT_IMAGE, sanitize=False)
    description = Text(sanitize=False)

    @classmethod
    def add(cls, name, price, category=None, stock=0, image=None, description=None):
        product = cls(
            name=name,
            price=price,
            category=category,
            stock=stock or 0,
            image=image or DEFAULT_PRODUCT_IMAGE,
            description=description,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                category=product.category,
                price=product.price,
                stock=product.stock,
            )
        )
        return product

    def update_details(self, name=None, price=None, category=None, stock=None, description=None):
        if name is not None:
            self.name = name
        if price is not None:
            if price < 0:
                raise ValidationError({"price": ["Price cannot be negative"]})
            self.price = price
        if category is not None:
            self.category = category
        if stock is not None:
            if stock < 0:
                raise ValidationError({"stock": ["Stock cannot be negative"]})
            self.stock = stock
        if description is not None:
            self.description = description

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                category=self.category,
                price=self.price,
                stock=self.stock,
            )
        )

    def change_image(self, image):
        self.image = image

    def decrement_stock(self, quantity):
        previous = self.stock or 0
        self.stock = max(0, previous - quantity)
        self.raise_(
            StockDecremented(
                product_id=str(self.id),
                requested=quantity,
                previous_stock=previous,
                new_stock=self.stock,
            )
        )
