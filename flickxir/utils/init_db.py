"""
Schema management for the storefront database
Creates tables, drops and recreates them, and optionally seeds catalog data
"""
from flickxir.generate_data import DataGenerator
from flickxir.utils.database import create_tables, drop_tables


def init_database():
    print("Creating storefront tables...")
    create_tables()
    print("✓ Tables ready")


def reset_database():
    """Drop every storefront table and create the schema again"""
    print("Dropping storefront tables...")
    drop_tables()
    init_database()


def seed_database(products: int = 60, customers: int = 20):
    with DataGenerator() as generator:
        generator.generate_all_master_data(products=products, customers=customers)


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Manage the storefront database schema")
    parser.add_argument("--init", action="store_true", help="Create missing tables")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    parser.add_argument("--seed", action="store_true", help="Load sample catalog and accounts afterwards")
    args = parser.parse_args()

    if not (args.init or args.reset or args.seed):
        parser.print_help()
        return

    if args.reset:
        reset_database()
    elif args.init:
        init_database()
    if args.seed:
        seed_database()


if __name__ == "__main__":
    main()
