import pytest

from mindsync import create_app
from mindsync.extensions import db

# ----------------------------------------------------
#                  HELPERS
# ----------------------------------------------------

PASSWORD = "password123"


def register(client, username, full_name=None, email=None, password=PASSWORD):
    """Register through the API; the client is logged in afterwards."""
    return client.post("/api/auth/register", json={
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
        "fullName": full_name or f"{username.title()} Example",
    })


def make_app(**overrides):
    return create_app("mindsync.config.TestConfig", overrides=overrides or None)

# ----------------------------------------------------
#                  PYTEST FIXTURES
# ----------------------------------------------------

@pytest.fixture(scope="function", params=["database", "memory"])
def app(request):
    """
    A fresh app with an empty in-memory database, once per storage backend,
    so every API test runs against both.
    """
    app = make_app(STORAGE_BACKEND=request.param)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def db_app():
    """Like ``app`` but always backed by SQLAlchemy."""
    app = make_app()
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    """An anonymous test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def alice(app):
    """A test client logged in as a freshly registered user."""
    test_client = app.test_client()
    response = register(test_client, "alice", full_name="Alice Liddell")
    assert response.status_code == 201
    test_client.user = response.get_json()
    return test_client


@pytest.fixture(scope="function")
def bob(app):
    """A second, unrelated logged-in user with its own cookie jar."""
    test_client = app.test_client()
    response = register(test_client, "bob", full_name="Bob Builder")
    assert response.status_code == 201
    test_client.user = response.get_json()
    return test_client
