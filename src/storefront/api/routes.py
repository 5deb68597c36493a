"""FastAPI routes for the Storefront domain: catalogue, cart, discounts and orders."""

import json

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from shared.auth import ADMIN_ROLE, admin_user, current_user, optional_user
from shared.uploads import delete_upload, save_upload
from storefront.api.schemas import (
    AddToCartRequest,
    ApplyDiscountRequest,
    ApplyDiscountResponse,
    BannerRequest,
    BannerResponse,
    BannerUpdateRequest,
    CartLineResponse,
    CartMutationResponse,
    CategoryRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    DiscountRequest,
    DiscountResponse,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductRequest,
    ProductResponse,
    ProductUpdateRequest,
    ReconcileResponse,
    SetQuantityRequest,
    StatusResponse,
)
from storefront.cart.items import AddToCart, RemoveFromCart, SetCartQuantity
from storefront.cart.queries import cart_lines
from storefront.cart.reconciliation import PurgeOrphanedCartItems
from storefront.catalogue.banner import Banner, CreateBanner, DeleteBanner, UpdateBanner
from storefront.catalogue.category import Category, CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.management import AddProduct, ChangeProductImage, RemoveProduct, UpdateProduct
from storefront.catalogue.product import Product
from storefront.discount.discount import Discount
from storefront.discount.management import CreateDiscount, DeleteDiscount, valid_discount
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.pricing import discounted_total, subtotal


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        price=product.price,
        category=product.category,
        stock=product.stock or 0,
        image=product.image,
        description=product.description,
    )


def _discount_response(discount: Discount) -> DiscountResponse:
    return DiscountResponse(
        id=str(discount.id),
        code=discount.code,
        percentage=discount.percentage,
        usage_limit=discount.usage_limit,
        used_count=discount.used_count or 0,
        remaining=discount.remaining,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        user_id=str(order.user_id),
        user_name=order.user_name,
        address=order.address,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                price=item.price,
                quantity=item.quantity,
            )
            for item in order.items
        ],
        subtotal=order.subtotal,
        discount_code=order.discount_code,
        discount_percentage=order.discount_percentage or 0.0,
        total_amount=order.total_amount,
        status=order.status,
        placed_at=order.placed_at,
    )


def _discard_replaced(previous: str | None, current: str | None) -> None:
    """Delete a stored upload once the command that replaced it has committed."""
    if previous and previous != current:
        delete_upload(previous)


def _require_min_quantity(quantity: int) -> None:
    if quantity is None or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def list_products(category: str | None = None) -> list[ProductResponse]:
    query = current_domain.repository_for(Product)._dao.query
    if category:
        query = query.filter(category=category)
    return [_product_response(p) for p in query.order_by("name").all().items]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.post("", status_code=201, response_model=ProductResponse)
async def add_product(body: ProductRequest, admin: dict = Depends(admin_user)) -> ProductResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        category=body.category,
        stock=body.stock,
        image=body.image,
        description=body.description,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: ProductUpdateRequest, admin: dict = Depends(admin_user)
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        price=body.price,
        category=body.category,
        stock=body.stock,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.post("/{product_id}/image", response_model=ProductResponse)
async def upload_product_image(
    product_id: str, image: UploadFile = File(...), admin: dict = Depends(admin_user)
) -> ProductResponse:
    # Fail before writing the file
    previous = current_domain.repository_for(Product).get(product_id).image
    url = await save_upload(image, "products")
    current_domain.process(ChangeProductImage(product_id=product_id, image=url), asynchronous=False)
    _discard_replaced(previous, url)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str, admin: dict = Depends(admin_user)) -> StatusResponse:
    image = current_domain.repository_for(Product).get(product_id).image
    lines_removed = current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    delete_upload(image)
    return StatusResponse(message=f"Product deleted; removed from {lines_removed} cart(s)")


# ---------------------------------------------------------------------------
# Category Router
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/categories", tags=["categories"])


def _category_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=str(category.id),
        name=category.name,
        description=category.description,
        image=category.image,
    )


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    categories = current_domain.repository_for(Category)._dao.query.order_by("name").all().items
    return [_category_response(c) for c in categories]


@category_router.post("", status_code=201, response_model=CategoryResponse)
async def create_category(body: CategoryRequest, admin: dict = Depends(admin_user)) -> CategoryResponse:
    command = CreateCategory(name=body.name, description=body.description, image=body.image)
    category_id = current_domain.process(command, asynchronous=False)
    return _category_response(current_domain.repository_for(Category).get(category_id))


@category_router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str, body: CategoryUpdateRequest, admin: dict = Depends(admin_user)
) -> CategoryResponse:
    previous = current_domain.repository_for(Category).get(category_id).image
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        image=body.image,
    )
    current_domain.process(command, asynchronous=False)
    category = current_domain.repository_for(Category).get(category_id)
    _discard_replaced(previous, category.image)
    return _category_response(category)


@category_router.delete("/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str, admin: dict = Depends(admin_user)) -> StatusResponse:
    image = current_domain.repository_for(Category).get(category_id).image
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    delete_upload(image)
    return StatusResponse(message="Category deleted")


# ---------------------------------------------------------------------------
# Banner Router
# ---------------------------------------------------------------------------
banner_router = APIRouter(prefix="/banners", tags=["banners"])


def _banner_response(banner: Banner) -> BannerResponse:
    return BannerResponse(
        id=str(banner.id),
        image_url=banner.image_url,
        title=banner.title,
        description=banner.description,
        discount=banner.discount,
    )


@banner_router.get("", response_model=list[BannerResponse])
async def list_banners() -> list[BannerResponse]:
    banners = current_domain.repository_for(Banner)._dao.query.order_by("-created_at").all().items
    return [_banner_response(b) for b in banners]


@banner_router.post("", status_code=201, response_model=BannerResponse)
async def create_banner(body: BannerRequest, admin: dict = Depends(admin_user)) -> BannerResponse:
    command = CreateBanner(
        image_url=body.image_url,
        title=body.title,
        description=body.description,
        discount=body.discount,
    )
    banner_id = current_domain.process(command, asynchronous=False)
    return _banner_response(current_domain.repository_for(Banner).get(banner_id))


@banner_router.put("/{banner_id}", response_model=BannerResponse)
async def update_banner(
    banner_id: str, body: BannerUpdateRequest, admin: dict = Depends(admin_user)
) -> BannerResponse:
    previous = current_domain.repository_for(Banner).get(banner_id).image_url
    command = UpdateBanner(
        banner_id=banner_id,
        image_url=body.image_url,
        title=body.title,
        description=body.description,
        discount=body.discount,
    )
    current_domain.process(command, asynchronous=False)
    banner = current_domain.repository_for(Banner).get(banner_id)
    _discard_replaced(previous, banner.image_url)
    return _banner_response(banner)


@banner_router.post("/{banner_id}/image", response_model=BannerResponse)
async def upload_banner_image(
    banner_id: str, image: UploadFile = File(...), admin: dict = Depends(admin_user)
) -> BannerResponse:
    previous = current_domain.repository_for(Banner).get(banner_id).image_url
    url = await save_upload(image, "banners")
    current_domain.process(UpdateBanner(banner_id=banner_id, image_url=url), asynchronous=False)
    _discard_replaced(previous, url)
    return _banner_response(current_domain.repository_for(Banner).get(banner_id))


@banner_router.delete("/{banner_id}", response_model=StatusResponse)
async def delete_banner(banner_id: str, admin: dict = Depends(admin_user)) -> StatusResponse:
    image_url = current_domain.repository_for(Banner).get(banner_id).image_url
    current_domain.process(DeleteBanner(banner_id=banner_id), asynchronous=False)
    delete_upload(image_url)
    return StatusResponse(message="Banner deleted")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=list[CartLineResponse])
async def get_cart(user: dict = Depends(current_user)) -> list[CartLineResponse]:
    return [
        CartLineResponse(
            product_id=str(line.product.id),
            quantity=line.item.quantity,
            line_total=line.line_total,
            product=_product_response(line.product),
        )
        for line in cart_lines(user["id"])
    ]


@cart_router.post("", response_model=CartMutationResponse)
async def add_to_cart(body: AddToCartRequest, user: dict = Depends(current_user)) -> CartMutationResponse:
    _require_min_quantity(body.quantity)
    command = AddToCart(user_id=user["id"], product_id=body.product_id, quantity=body.quantity)
    quantity = current_domain.process(command, asynchronous=False)
    return CartMutationResponse(message="Cart updated", product_id=body.product_id, quantity=quantity)


@cart_router.put("/{product_id}", response_model=CartMutationResponse)
async def set_cart_quantity(
    product_id: str, body: SetQuantityRequest, user: dict = Depends(current_user)
) -> CartMutationResponse:
    _require_min_quantity(body.quantity)
    command = SetCartQuantity(user_id=user["id"], product_id=product_id, quantity=body.quantity)
    quantity = current_domain.process(command, asynchronous=False)
    return CartMutationResponse(message="Cart updated", product_id=product_id, quantity=quantity)


@cart_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_from_cart(product_id: str, user: dict = Depends(current_user)) -> StatusResponse:
    current_domain.process(RemoveFromCart(user_id=user["id"], product_id=product_id), asynchronous=False)
    return StatusResponse(message="Item removed")


@cart_router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_carts(admin: dict = Depends(admin_user)) -> ReconcileResponse:
    purged = current_domain.process(PurgeOrphanedCartItems(requested_by=admin["id"]), asynchronous=False)
    return ReconcileResponse(purged=purged)


# ---------------------------------------------------------------------------
# Discount Router
# ---------------------------------------------------------------------------
discount_router = APIRouter(prefix="/discounts", tags=["discounts"])


@discount_router.get("", response_model=list[DiscountResponse])
async def list_discounts() -> list[DiscountResponse]:
    discounts = current_domain.repository_for(Discount)._dao.query.order_by("code").all().items
    return [_discount_response(d) for d in discounts]


@discount_router.post("/apply", response_model=ApplyDiscountResponse)
async def apply_discount(
    body: ApplyDiscountRequest, user: dict | None = Depends(optional_user)
) -> ApplyDiscountResponse:
    """Preview a discount code against a subtotal. Usage counters are not touched."""
    discount = valid_discount(body.code)

    if body.subtotal is not None:
        amount = subtotal([(body.subtotal, 1)])
    elif user:
        amount = subtotal((line.product.price, line.item.quantity) for line in cart_lines(user["id"]))
    else:
        amount = 0.0

    return ApplyDiscountResponse(
        discount=_discount_response(discount),
        subtotal=amount,
        discounted_amount=discounted_total(amount, discount.percentage),
    )


@discount_router.post("", status_code=201, response_model=DiscountResponse)
async def create_discount(body: DiscountRequest, admin: dict = Depends(admin_user)) -> DiscountResponse:
    command = CreateDiscount(code=body.code, percentage=body.percentage, usage_limit=body.usage_limit)
    discount_id = current_domain.process(command, asynchronous=False)
    return _discount_response(current_domain.repository_for(Discount).get(discount_id))


@discount_router.delete("/{discount_id}", response_model=StatusResponse)
async def delete_discount(discount_id: str, admin: dict = Depends(admin_user)) -> StatusResponse:
    current_domain.process(DeleteDiscount(discount_id=discount_id), asynchronous=False)
    return StatusResponse(message="Discount deleted")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _is_admin(user: dict) -> bool:
    return user.get("role") == ADMIN_ROLE


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, user: dict = Depends(current_user)) -> OrderResponse:
    if body.user_id and body.user_id != user["id"]:
        raise HTTPException(status_code=403, detail="Cannot place an order for another user")

    items = None
    if body.items is not None:
        items = json.dumps([item.model_dump() for item in body.items])

    command = PlaceOrder(
        user_id=user["id"],
        user_name=body.user_name or user["name"],
        address=body.address,
        items=items,
        total_amount=body.total_amount,
        discount_code=body.discount_code,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(user: dict = Depends(current_user)) -> list[OrderResponse]:
    query = current_domain.repository_for(Order)._dao.query
    if not _is_admin(user):
        query = query.filter(user_id=user["id"])
    return [_order_response(o) for o in query.order_by("-placed_at").all().items]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: dict = Depends(current_user)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if not _is_admin(user) and str(order.user_id) != user["id"]:
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return _order_response(order)
