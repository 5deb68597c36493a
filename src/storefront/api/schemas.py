"""Pydantic request/response schemas for the Storefront API.

The client speaks camelCase; every schema accepts both spellings and responds
with camelCase aliases.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Catalogue ---


class ProductRequest(CamelModel):
    name: str
    price: float = Field(ge=0)
    category: str | None = None
    stock: int = Field(default=0, ge=0)
    image: str | None = None
    description: str | None = None


class ProductUpdateRequest(CamelModel):
    name: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    stock: int | None = Field(default=None, ge=0)
    description: str | None = None


class ProductResponse(CamelModel):
    id: str
    name: str
    price: float
    category: str | None = None
    stock: int = 0
    image: str | None = None
    description: str | None = None


class CategoryRequest(CamelModel):
    name: str
    description: str | None = None
    image: str | None = None


class CategoryUpdateRequest(CamelModel):
    name: str | None = None
    description: str | None = None
    image: str | None = None


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    image: str | None = None


class BannerRequest(CamelModel):
    image_url: str
    title: str | None = None
    description: str | None = None
    discount: float | None = Field(default=None, ge=0, le=100)


class BannerUpdateRequest(CamelModel):
    image_url: str | None = None
    title: str | None = None
    description: str | None = None
    discount: float | None = Field(default=None, ge=0, le=100)


class BannerResponse(CamelModel):
    id: str
    image_url: str
    title: str | None = None
    description: str | None = None
    discount: float | None = None


# --- Cart ---


class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1


class SetQuantityRequest(CamelModel):
    quantity: int


class CartLineResponse(CamelModel):
    product_id: str
    quantity: int
    line_total: float
    product: ProductResponse


class CartMutationResponse(CamelModel):
    message: str
    product_id: str
    quantity: int


class ReconcileResponse(CamelModel):
    purged: int


# --- Discounts ---


class DiscountRequest(CamelModel):
    code: str
    percentage: float = Field(ge=1, le=100)
    usage_limit: int = Field(ge=1)


class DiscountResponse(CamelModel):
    id: str
    code: str
    percentage: float
    usage_limit: int
    used_count: int
    remaining: int


class ApplyDiscountRequest(CamelModel):
    code: str
    subtotal: float | None = Field(default=None, ge=0)


class ApplyDiscountResponse(CamelModel):
    discount: DiscountResponse
    subtotal: float
    discounted_amount: float


# --- Orders ---


class OrderItemRequest(CamelModel):
    product_id: str = Field(validation_alias=AliasChoices("productId", "product_id", "id"))
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)


class PlaceOrderRequest(CamelModel):
    user_id: str | None = None
    user_name: str | None = None
    address: str
    items: list[OrderItemRequest] | None = None
    total_amount: float | None = None
    discount_code: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"address": "12 Market Street, Springfield", "discountCode": "SAVE10"},
            ]
        },
    )


class OrderItemResponse(CamelModel):
    product_id: str
    name: str
    price: float
    quantity: int


class OrderResponse(CamelModel):
    id: str
    user_id: str
    user_name: str
    address: str
    items: list[OrderItemResponse]
    subtotal: float
    discount_code: str | None = None
    discount_percentage: float = 0.0
    total_amount: float
    status: str
    placed_at: datetime | None = None


class StatusResponse(CamelModel):
    status: str = "ok"
    message: str | None = None
