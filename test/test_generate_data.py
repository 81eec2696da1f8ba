from sqlalchemy import inspect

from flickxir.generate_data import CATEGORY_DATA, DataGenerator
from flickxir.models import Category, Medicine, Product, User
from flickxir.services import auth_service
from flickxir.utils.database import engine
from flickxir.utils.init_db import init_database, reset_database


def test_generate_catalog(db):
    generator = DataGenerator(db)

    categories = generator.generate_categories()
    products = generator.generate_products(25)
    medicines = generator.generate_medicines()

    assert len(categories) == len(CATEGORY_DATA)
    assert len(products) == 25
    assert db.query(Medicine).count() == len(medicines)
    for product in db.query(Product).all():
        assert product.price <= product.mrp
        assert product.in_stock == (product.stock_quantity > 0)


def test_products_need_categories(db):
    assert DataGenerator(db).generate_products(5) == []


def test_customers_and_admin_can_sign_in(db):
    generator = DataGenerator(db)

    customers = generator.generate_customers(2)
    admin = generator.generate_admin()

    assert admin.is_admin
    assert generator.generate_admin().user_id == admin.user_id
    for customer in customers:
        assert customer.profile.first_name
        auth_service.sign_in(db, customer.email, "password123")
    assert db.query(User).count() == 3


def test_clear_keeps_accounts(db):
    generator = DataGenerator(db)
    generator.generate_categories()
    generator.generate_products(5)
    generator.generate_admin()

    generator.clear_all_data()

    assert db.query(Product).count() == 0
    assert db.query(Category).count() == 0
    assert db.query(User).count() == 1


def test_init_and_reset_schema():
    init_database()
    reset_database()

    tables = inspect(engine).get_table_names()
    assert {"users", "products", "orders", "prescriptions", "medicine_donations"} <= set(tables)
