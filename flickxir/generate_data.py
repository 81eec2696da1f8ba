"""
Data generation script for catalog and account data
This script generates data for:
- Categories
- Products
- Medicines
- Customer accounts (with profiles) and the admin account

Orders, carts and prescriptions are created through the API.
"""
import random
from decimal import Decimal

from faker import Faker
from sqlalchemy.orm import Session

from flickxir.config import ADMIN_EMAILS
from flickxir.models import (
    Category,
    Product,
    Medicine,
    User,
    UserProfile,
    Cart,
    CartItem,
    Order,
    OrderItem,
    Donation,
    DonationItem,
)
from flickxir.utils.database import SessionLocal
from flickxir.utils.security import hash_password

fake = Faker(["en_IN"])

DEFAULT_PASSWORD = "password123"

CATEGORY_DATA = [
    ("Medicines", "Prescription and over-the-counter medicines"),
    ("Vitamins & Supplements", "Daily vitamins, minerals and nutrition supplements"),
    ("Personal Care", "Skin, hair and oral care essentials"),
    ("Baby Care", "Diapers, baby food and baby skin care"),
    ("Health Devices", "Monitors, thermometers and home diagnostics"),
    ("Ayurveda", "Herbal and ayurvedic wellness products"),
]

# name, description, min price, max price, requires prescription
PRODUCT_TEMPLATES = {
    "Medicines": [
        ("Paracetamol 500mg", "Fever and mild pain relief, strip of 15 tablets", 20, 40, False),
        ("Amoxicillin 250mg", "Antibiotic capsules, strip of 10", 40, 90, True),
        ("Cetirizine 10mg", "Antihistamine for allergy relief", 15, 35, False),
        ("Metformin 500mg", "Blood sugar control tablets", 30, 70, True),
        ("Azithromycin 500mg", "Antibiotic tablets, strip of 3", 60, 130, True),
    ],
    "Vitamins & Supplements": [
        ("Vitamin C 1000mg", "Immunity support effervescent tablets", 90, 250, False),
        ("Vitamin D3 60000 IU", "Weekly vitamin D capsules", 100, 220, False),
        ("Omega 3 Fish Oil", "Heart and joint health softgels", 300, 900, False),
        ("Multivitamin Daily", "Complete daily multivitamin", 250, 700, False),
    ],
    "Personal Care": [
        ("Antiseptic Liquid", "Multi-purpose antiseptic disinfectant", 80, 250, False),
        ("Sunscreen SPF 50", "Broad spectrum sunscreen lotion", 250, 650, False),
        ("Sensitive Toothpaste", "Toothpaste for sensitive teeth", 90, 220, False),
    ],
    "Baby Care": [
        ("Baby Diapers Medium", "Pack of 40 diapers", 400, 900, False),
        ("Baby Lotion", "Gentle moisturising lotion", 150, 400, False),
    ],
    "Health Devices": [
        ("Digital Thermometer", "Fast and accurate digital thermometer", 150, 450, False),
        ("Blood Pressure Monitor", "Automatic upper arm BP monitor", 1200, 3500, False),
        ("Pulse Oximeter", "Fingertip SpO2 and pulse monitor", 600, 1800, False),
    ],
    "Ayurveda": [
        ("Ashwagandha Tablets", "Stress relief herbal tablets", 150, 400, False),
        ("Chyawanprash", "Herbal immunity booster jam", 200, 450, False),
    ],
}

STATES = ["Maharashtra", "Karnataka", "Tamil Nadu", "Delhi", "Gujarat", "West Bengal", "Kerala", "Telangana"]

BRANDS = ["Cipla", "Sun Pharma", "Himalaya", "Dabur", "Abbott", "Mankind", "Dr. Reddy's", "Omron"]


class DataGenerator:
    def __init__(self, db: Session = None):
        self.db = db if db is not None else SessionLocal()
        self._owns_session = db is None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._owns_session:
            self.db.close()

    def generate_categories(self, count: int = len(CATEGORY_DATA)):
        """Generate product categories"""
        print(f"Generating {count} categories...")

        categories = [Category(name=name, description=description) for name, description in CATEGORY_DATA[:count]]
        self.db.add_all(categories)

        try:
            self.db.commit()
            print(f"✓ Created {len(categories)} categories")
            return categories
        except Exception as e:
            print(f"✗ Error creating categories: {e}")
            self.db.rollback()
            return []

    def generate_products(self, count: int = 60):
        """Generate products for existing categories"""
        print(f"Generating {count} products...")

        categories = [c for c in self.db.query(Category).all() if c.name in PRODUCT_TEMPLATES]
        if not categories:
            print("No categories found. Please generate categories first.")
            return []

        products = []
        for _ in range(count):
            category = random.choice(categories)
            base_name, description, min_price, max_price, requires_prescription = random.choice(
                PRODUCT_TEMPLATES[category.name]
            )
            mrp = random.randint(min_price, max_price)
            # 0-25% off MRP
            price = Decimal(str(round(mrp * (1 - random.choice([0, 0.05, 0.1, 0.15, 0.2, 0.25])), 2)))
            stock = random.choice([0, random.randint(5, 200), random.randint(5, 200)])

            product = Product(
                name=f"{random.choice(BRANDS)} {base_name}",
                description=description,
                price=price,
                mrp=Decimal(str(mrp)),
                stock_quantity=stock,
                in_stock=stock > 0,
                featured=random.random() < 0.15,
                requires_prescription=requires_prescription,
                category_id=category.category_id,
                image_urls=[],
                is_active=random.choice([True, True, True, False]),  # 75% active
            )
            products.append(product)

        self.db.add_all(products)
        try:
            self.db.commit()
            print(f"✓ Created {len(products)} products")
            return products
        except Exception as e:
            print(f"✗ Error creating products: {e}")
            self.db.rollback()
            return []

    def generate_medicines(self):
        """Generate the medicine reference catalog from the medicine templates"""
        medicines = [
            Medicine(
                name=name,
                description=description,
                manufacturer=random.choice(BRANDS),
                dosage_form="Capsule" if "Capsule" in description or "capsules" in description else "Tablet",
                price=Decimal(str(random.randint(low, high))),
            )
            for name, description, low, high, _ in PRODUCT_TEMPLATES["Medicines"]
        ]
        self.db.add_all(medicines)
        try:
            self.db.commit()
            print(f"✓ Created {len(medicines)} medicines")
            return medicines
        except Exception as e:
            print(f"✗ Error creating medicines: {e}")
            self.db.rollback()
            return []

    def generate_customers(self, count: int = 20):
        """Generate customer accounts with profiles"""
        print(f"Generating {count} customers...")

        customers = []
        for _ in range(count):
            first_name = fake.first_name()
            last_name = fake.last_name()
            email = f"{first_name.lower()}.{last_name.lower()}{random.randint(1, 999)}@{fake.free_email_domain()}"
            phone = f"{random.choice('6789')}{random.randint(100000000, 999999999)}"

            user = User(
                email=email,
                password=hash_password(DEFAULT_PASSWORD),
                full_name=f"{first_name} {last_name}",
                phone=phone,
            )
            user.profile = UserProfile(
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
                address=fake.street_address(),
                city=fake.city(),
                state=random.choice(STATES),
                pincode=str(random.randint(110000, 855999)),
            )
            customers.append(user)

        self.db.add_all(customers)
        try:
            self.db.commit()
            print(f"✓ Created {len(customers)} customers")
            return customers
        except Exception as e:
            print(f"✗ Error creating customers: {e}")
            self.db.rollback()
            return []

    def generate_admin(self, password: str = DEFAULT_PASSWORD):
        """Create the first configured admin account if it does not exist yet"""
        if not ADMIN_EMAILS:
            print("No ADMIN_EMAILS configured, skipping admin account")
            return None
        email = ADMIN_EMAILS[0]
        admin = self.db.query(User).filter(User.email == email).first()
        if admin:
            print(f"Admin account {email} already exists")
            return admin

        admin = User(email=email, password=hash_password(password), full_name="Store Admin")
        admin.profile = UserProfile(first_name="Store", last_name="Admin", email=email)
        self.db.add(admin)
        self.db.commit()
        print(f"✓ Created admin account {email}")
        return admin

    def clear_all_data(self):
        """Clear catalog and order data from database"""
        print("Clearing all data...")
        try:
            # Delete in correct order to avoid foreign key constraints
            for model in (OrderItem, Order, CartItem, Cart, DonationItem, Donation, Product, Category, Medicine):
                self.db.query(model).delete()
            self.db.commit()
            print("✓ All data cleared")
        except Exception as e:
            print(f"✗ Error clearing data: {e}")
            self.db.rollback()

    def generate_all_master_data(self, products=60, customers=20):
        """Generate all catalog and account data"""
        print("=== Generating Master Data ===")

        self.clear_all_data()

        categories = self.generate_categories()
        if categories:
            products = self.generate_products(products)
            medicines = self.generate_medicines()
            customers = self.generate_customers(customers)
            self.generate_admin()

            print("\n=== Master Data Generation Complete ===")
            print(f"Categories: {len(categories)}")
            print(f"Products: {len(products)}")
            print(f"Medicines: {len(medicines)}")
            print(f"Customers: {len(customers)}")
        else:
            print("Failed to generate categories. Stopping.")


def main():
    """Main function to run data generation"""
    import argparse

    parser = argparse.ArgumentParser(description="Generate catalog and account data for the storefront")
    parser.add_argument("--products", type=int, default=60, help="Number of products to generate")
    parser.add_argument("--customers", type=int, default=20, help="Number of customers to generate")
    parser.add_argument("--clear", action="store_true", help="Clear all existing data")

    args = parser.parse_args()

    with DataGenerator() as generator:
        if args.clear:
            generator.clear_all_data()
        else:
            generator.generate_all_master_data(products=args.products, customers=args.customers)


if __name__ == "__main__":
    main()
