import os
import tempfile
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Configure the environment and initialize both domains. Importing ``app``
    initializes them exactly once for the whole session.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["FRESHCART_ENVIRONMENT"] = "test"

    scratch = Path(tempfile.mkdtemp(prefix="freshcart-tests-"))
    os.environ.setdefault("FRESHCART_UPLOAD_DIR", str(scratch / "uploads"))
    os.environ.setdefault("FRESHCART_LOG_DIR", str(scratch / "logs"))

    import app  # noqa: F401


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def identity_domain():
    from identity.domain import identity

    return identity


@pytest.fixture(scope="session")
def storefront_domain():
    from storefront.domain import storefront

    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(identity_domain, storefront_domain):
    from shared.db import drop_db, setup_db

    setup_db(identity_domain)
    setup_db(storefront_domain)

    yield

    drop_db(storefront_domain)
    drop_db(identity_domain)


@pytest.fixture(autouse=True)
def run_around_tests(identity_domain, storefront_domain):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from shared.db import reset_data

    reset_data(identity_domain)
    reset_data(storefront_domain)


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from app import app

    return TestClient(app)


@pytest.fixture()
def register_user(identity_domain):
    """Create a user directly through the identity domain and return its id."""
    from protean.utils.globals import current_domain

    from identity.user.registration import RegisterUser

    def _register(name="Default User", email="user@example.com", password="password123", role="user"):
        with identity_domain.domain_context():
            command = RegisterUser(name=name, email=email, password=password, role=role)
            return current_domain.process(command, asynchronous=False)

    return _register


@pytest.fixture()
def shopper(client):
    """Register a shopper through the API; ``client`` now carries their session."""
    response = client.post(
        "/auth/register",
        json={"name": "Default User", "email": "user@example.com", "password": "password123"},
    )
    assert response.status_code == 201
    return response.json()["user"]


@pytest.fixture()
def admin_client(register_user):
    from fastapi.testclient import TestClient

    from app import app

    register_user(name="Admin", email="admin@example.com", password="admin123", role="admin")
    admin = TestClient(app)
    response = admin.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    assert response.status_code == 200
    return admin
