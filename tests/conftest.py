from decimal import Decimal

import pytest

from lenspro import create_app
from lenspro.config import TestingConfig
from lenspro.extensions import db
from lenspro.models import Equipment
from lenspro.services import AuthService

PASSWORD = "secret123"


@pytest.fixture()
def app(tmp_path):
    class _Config(TestingConfig):
        UPLOAD_DIR = str(tmp_path / "uploads")

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Register a user with the given role and return its id."""

    def _make(role="customer", email=None, name=None):
        email = email or f"{role}@lenspro.test"
        with app.app_context():
            user = AuthService.register_user(
                name=name or role.title(),
                email=email,
                password=PASSWORD,
                role=role,
            )
            return user.id

    return _make


@pytest.fixture()
def make_equipment(app):
    def _make(name="Canon EOS R5", rate_12hr="500", rate_24hr="800", available=True):
        with app.app_context():
            item = Equipment(
                name=name,
                rate_12hr=Decimal(rate_12hr),
                rate_24hr=Decimal(rate_24hr),
                available=available,
            )
            db.session.add(item)
            db.session.commit()
            return item.id

    return _make


@pytest.fixture()
def login(client):
    def _login(email, password=PASSWORD):
        return client.post("/login", data={"email": email, "password": password})

    return _login
