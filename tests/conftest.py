import pytest

from app import create_app
from config import Config
from models import db
from models.user import User
from security.password import hash_password


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    BCRYPT_ROUNDS = 4
    LOCKOUT_WINDOW_SECONDS = 10


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def request_ctx(app):
    with app.test_request_context("/api/authentication/login", headers={"User-Agent": "pytest"}):
        yield


@pytest.fixture
def make_user(app):
    def _make(name="Alice", email="alice@example.com", password="Secret#123", attempt=0, updated_on=None):
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            attempt=attempt,
            updated_on=updated_on,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def auth_headers(client, make_user):
    make_user(name="Admin", email="admin@example.com", password="Admin#123")
    resp = client.post("/api/authentication/login", json={"email": "admin@example.com", "password": "Admin#123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}
