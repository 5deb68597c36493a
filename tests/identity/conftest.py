import pytest


@pytest.fixture(autouse=True)
def identity_context(identity_domain):
    """Push the identity domain context for each test."""
    ctx = identity_domain.domain_context()
    ctx.push()

    yield

    ctx.pop()
