"""
Pytest fixtures for lunishop backend tests.

Every test gets a fresh app on in-memory SQLite, seeded with two outlets,
two products, some stock, and one account per role with a live bearer token.
"""

import pytest

from lunishop import create_app
from lunishop.extensions import db
from lunishop.models import Product, SalesOutlet, StockItem
from lunishop.permissions import Role
from lunishop.services import session_service, user_service


PASSWORD = "secret123"


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seed(app):
    """
    Catalog and stock:

    - outlet "Main St 1" stocks boots size 42 (5), size 43 (1), scarf size 0 (10)
    - outlet "Side St 2" stocks nothing
    """
    main = SalesOutlet(address="Main St 1")
    side = SalesOutlet(address="Side St 2")
    boots = Product(name="Boots", description="Leather boots", price=12000)
    scarf = Product(name="Scarf", price=2500)
    db.session.add_all([main, side, boots, scarf])
    db.session.flush()

    db.session.add_all([
        StockItem(sales_outlet_id=main.id, product_id=boots.id, size=42, amount=5),
        StockItem(sales_outlet_id=main.id, product_id=boots.id, size=43, amount=1),
        StockItem(sales_outlet_id=main.id, product_id=scarf.id, size=0, amount=10),
    ])
    db.session.commit()

    return {
        "main_outlet_id": main.id,
        "side_outlet_id": side.id,
        "boots_id": boots.id,
        "scarf_id": scarf.id,
    }


def _account(role: Role, email: str) -> dict:
    user = user_service.create_user(
        email=email,
        password=PASSWORD,
        name=role.value.title(),
        surname="Tester",
        role=role.value,
    )
    _, token = session_service.create_session(user.id)
    return {"id": user.id, "email": email, "token": token}


@pytest.fixture(scope='function')
def accounts(app):
    """One account per role, keyed by role name."""
    return {
        "user": _account(Role.USER, "user@lunishop.test"),
        "other": _account(Role.USER, "other@lunishop.test"),
        "seller": _account(Role.SELLER, "seller@lunishop.test"),
        "accountant": _account(Role.ACCOUNTANT, "accountant@lunishop.test"),
        "admin": _account(Role.ADMIN, "admin@lunishop.test"),
    }


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def user_headers(accounts):
    return auth_headers(accounts["user"]["token"])


@pytest.fixture(scope='function')
def other_headers(accounts):
    return auth_headers(accounts["other"]["token"])


@pytest.fixture(scope='function')
def seller_headers(accounts):
    return auth_headers(accounts["seller"]["token"])


@pytest.fixture(scope='function')
def accountant_headers(accounts):
    return auth_headers(accounts["accountant"]["token"])


@pytest.fixture(scope='function')
def admin_headers(accounts):
    return auth_headers(accounts["admin"]["token"])
