"""
Pytest fixtures for cafeteria backend tests.

Provides test database setup, users per role with bearer tokens, a small
menu, and the Flask test client.
"""

import pytest
from cafeteria import create_app
from cafeteria.extensions import db
from cafeteria.models import MenuItem, User
from cafeteria.models.auth import ROLE_ADMIN, ROLE_CAFETERIA_STAFF, ROLE_STUDENT
from cafeteria.services.auth_service import hash_password
from cafeteria.services.session_service import create_session


TEST_PASSWORD = "Password123"

# bcrypt is slow on purpose; hash once for every fixture user
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope='session')
def app():
    """One app per test session, backed by in-memory SQLite."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table before the test runs."""
    with app.app_context():
        # Schema stays; rows go
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def _make_user(db_session, name: str, email: str, role: str, balance_paise: int = 0) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        role=role,
        wallet_balance_paise=balance_paise,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def student(db_session):
    return _make_user(db_session, "Asha Student", "asha@campus.edu", ROLE_STUDENT, balance_paise=50000)


@pytest.fixture(scope='function')
def other_student(db_session):
    return _make_user(db_session, "Ravi Student", "ravi@campus.edu", ROLE_STUDENT)


@pytest.fixture(scope='function')
def kitchen_staff(db_session):
    return _make_user(db_session, "Kitchen Staff", "kitchen@cafeteria.local", ROLE_CAFETERIA_STAFF)


@pytest.fixture(scope='function')
def admin(db_session):
    return _make_user(db_session, "Cafeteria Admin", "admin@cafeteria.local", ROLE_ADMIN)


@pytest.fixture(scope='function')
def student_token(student):
    _, token = create_session(student.id)
    return token


@pytest.fixture(scope='function')
def other_student_token(other_student):
    _, token = create_session(other_student.id)
    return token


@pytest.fixture(scope='function')
def staff_token(kitchen_staff):
    _, token = create_session(kitchen_staff.id)
    return token


@pytest.fixture(scope='function')
def admin_token(admin):
    _, token = create_session(admin.id)
    return token


@pytest.fixture(scope='function')
def menu(db_session):
    """Five dishes across three categories; Mysore Pak is unavailable."""
    items = [
        MenuItem(name="Masala Dosa", price_paise=6000, category="breakfast", is_popular=True,
                 ingredients=["Rice", "Potatoes"], tags=[]),
        MenuItem(name="Idli Sambar", price_paise=5000, category="breakfast",
                 ingredients=["Rice", "Urad Dal"], tags=[]),
        MenuItem(name="Hyderabadi Biryani", price_paise=18000, category="dinner", is_popular=True,
                 ingredients=["Basmati Rice", "Chicken"], tags=[]),
        MenuItem(name="Filter Coffee", price_paise=3000, category="beverages", is_popular=True,
                 ingredients=["Coffee Powder"], tags=[]),
        MenuItem(name="Mysore Pak", price_paise=2500, category="desserts", status="unavailable",
                 ingredients=["Ghee"], tags=[]),
    ]
    db_session.add_all(items)
    db_session.commit()
    return {item.name: item for item in items}


@pytest.fixture(scope='function')
def student_headers(student_token):
    return auth_headers(student_token)


@pytest.fixture(scope='function')
def other_student_headers(other_student_token):
    return auth_headers(other_student_token)


@pytest.fixture(scope='function')
def staff_headers(staff_token):
    return auth_headers(staff_token)


@pytest.fixture(scope='function')
def admin_headers(admin_token):
    return auth_headers(admin_token)
