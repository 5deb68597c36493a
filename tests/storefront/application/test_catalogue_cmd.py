"""Application tests for product, category and banner management."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.catalogue.banner import Banner, CreateBanner, DeleteBanner, UpdateBanner
from storefront.catalogue.category import Category, CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.management import ChangeProductImage, RemoveProduct, UpdateProduct
from storefront.catalogue.product import Product


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestProductManagement:
    def test_add_product(self, add_product):
        product = current_domain.repository_for(Product).get(add_product(name="Carrots", price=0.9))
        assert product.name == "Carrots"
        assert product.price == 0.9

    def test_update_product(self, add_product):
        product_id = add_product()
        _process(UpdateProduct(product_id=product_id, price=0.75, stock=40))
        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 0.75
        assert product.stock == 40
        assert product.name == "Bananas"

    def test_change_image(self, add_product):
        product_id = add_product()
        _process(ChangeProductImage(product_id=product_id, image="/uploads/products/bananas.png"))
        assert current_domain.repository_for(Product).get(product_id).image == "/uploads/products/bananas.png"

    def test_remove_product(self, add_product):
        product_id = add_product()
        assert _process(RemoveProduct(product_id=product_id)) == 0
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Product).get(product_id)

    def test_remove_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _process(RemoveProduct(product_id="missing"))


class TestCategoryManagement:
    def test_create_with_default_image(self):
        category = current_domain.repository_for(Category).get(_process(CreateCategory(name="Dairy")))
        assert category.name == "Dairy"
        assert category.image == "/images/category.png"

    def test_names_are_unique_case_insensitively(self):
        _process(CreateCategory(name="Dairy"))
        with pytest.raises(ValidationError):
            _process(CreateCategory(name="dairy"))

    def test_rename(self):
        category_id = _process(CreateCategory(name="Diary"))
        _process(UpdateCategory(category_id=category_id, name="Dairy"))
        assert current_domain.repository_for(Category).get(category_id).name == "Dairy"

    def test_rename_to_existing_name(self):
        _process(CreateCategory(name="Dairy"))
        category_id = _process(CreateCategory(name="Bakery"))
        with pytest.raises(ValidationError):
            _process(UpdateCategory(category_id=category_id, name="DAIRY"))

    def test_delete(self):
        category_id = _process(CreateCategory(name="Dairy"))
        _process(DeleteCategory(category_id=category_id))
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Category).get(category_id)


class TestBannerManagement:
    def test_create_with_defaults(self):
        banner = current_domain.repository_for(Banner).get(_process(CreateBanner(image_url="/images/b.png")))
        assert banner.title == "New Offer"
        assert banner.description == "Check out this deal!"
        assert banner.discount == 10.0

    def test_update(self):
        banner_id = _process(CreateBanner(image_url="/images/b.png"))
        _process(UpdateBanner(banner_id=banner_id, title="Summer Fruits", discount=25))
        banner = current_domain.repository_for(Banner).get(banner_id)
        assert banner.title == "Summer Fruits"
        assert banner.discount == 25

    def test_discount_bounds(self):
        with pytest.raises(ValidationError):
            _process(CreateBanner(image_url="/images/b.png", discount=150))

    def test_delete(self):
        banner_id = _process(CreateBanner(image_url="/images/b.png"))
        _process(DeleteBanner(banner_id=banner_id))
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Banner).get(banner_id)
