import pytest
import os
import uuid

from config import TestConfig
from retailflow import create_app
from retailflow import database
from retailflow.database import Base, create_schema, get_session
from retailflow.models import Customer, Supplier, Product, User
from retailflow.services.auth_service import seed_roles, create_user, issue_token
from retailflow.services.code_service import seed_code_formats


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application instance backed by a throwaway SQLite file."""
    base_dir = tmp_path_factory.mktemp('retailflow')

    class Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL') or f"sqlite:///{base_dir / 'test.db'}"
        SESSION_FILE = str(base_dir / 'session.json')
        UPLOAD_FOLDER = str(base_dir / 'uploads')

    app = create_app(Config)
    with app.app_context():
        create_schema()
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function', autouse=True)
def clean_database(app):
    """Start every test from empty tables with roles and code formats seeded."""
    session = get_session()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    seed_roles(session)
    seed_code_formats(session)
    yield
    database.db_session.remove()


@pytest.fixture(scope='function')
def session(app):
    """Database session inside an application context."""
    with app.app_context():
        session = get_session()
        yield session
        session.rollback()


@pytest.fixture(scope='function')
def supplier(session):
    """Create test supplier."""
    supplier = Supplier(code='SUP90001', name='Acme Wholesale', email='sales@acme.test', city='Colombo')
    session.add(supplier)
    session.commit()
    return supplier


@pytest.fixture(scope='function')
def customer(session):
    """Create test customer."""
    customer = Customer(code='CUS90001', name='Jane Buyer', email='jane@buyer.test', contact='555-0100')
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture(scope='function')
def product(session):
    """Create test product with 10 units in stock."""
    product = Product(
        sku='SKU90001',
        name='Test Widget',
        category='Widgets',
        quantity=10,
        cost=5,
        price=12.5,
        max_discount=10,
    )
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def admin_user(session):
    """Create an admin user and return (id, username, password)."""
    username = f'admin-{uuid.uuid4().hex[:8]}'
    password = 'password123'
    user_id = create_user(session, username, password, f'{username}@test.com', 'admin')
    return user_id, username, password


@pytest.fixture(scope='function')
def auth_headers(app, session, admin_user):
    """Authorization header carrying a valid bearer token for admin_user."""
    user = session.query(User).filter_by(id=admin_user[0]).one()
    token = issue_token(user, app.config['JWT_SECRET'])
    return {'Authorization': f'Bearer {token}'}
