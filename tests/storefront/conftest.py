import pytest


@pytest.fixture(autouse=True)
def storefront_context(storefront_domain):
    """Push the storefront domain context for each test."""
    ctx = storefront_domain.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture()
def add_product():
    """Add a product through the catalogue command and return its id."""
    from protean import current_domain

    from storefront.catalogue.management import AddProduct

    def _add(name="Bananas", price=0.5, category="Fruits", stock=10):
        command = AddProduct(name=name, price=price, category=category, stock=stock)
        return current_domain.process(command, asynchronous=False)

    return _add


@pytest.fixture()
def add_discount():
    from protean import current_domain

    from storefront.discount.management import CreateDiscount

    def _add(code="SAVE10", percentage=10, usage_limit=5):
        command = CreateDiscount(code=code, percentage=percentage, usage_limit=usage_limit)
        return current_domain.process(command, asynchronous=False)

    return _add
