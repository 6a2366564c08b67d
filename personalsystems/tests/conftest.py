import pytest

from personalsystems import create_app
from personalsystems.core.auth.auth_service import issue_token, register_user
from personalsystems.core.auth.schemas import SignupRequest
from personalsystems.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app():
    """Per-test app on a fresh in-memory database."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(email: str = "tester@example.com", password: str = "secret123", name: str = "Tester"):
    return register_user(SignupRequest(email=email, password=password, name=name))


def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture()
def user(app):
    return make_user()


@pytest.fixture()
def headers(user):
    return auth_headers(user)


@pytest.fixture()
def other_headers(app):
    """Headers for a second account, for ownership checks."""
    return auth_headers(make_user(email="other@example.com", name="Other"))
