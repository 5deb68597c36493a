"""FreshCart database management CLI.

Provides commands to create and drop database schemas for all domains, and to
seed a fresh database with demo users, groceries and discount codes.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load demo data (safe to re-run)
"""

import argparse
import sys

DOMAIN_CHOICES = ["identity", "storefront"]

SEED_USERS = [
    {"name": "Admin", "email": "admin@example.com", "password": "admin123", "role": "admin"},
    {"name": "Default User", "email": "user@example.com", "password": "password123", "role": "user"},
]

SEED_CATEGORIES = [
    {"name": "Fruits", "description": "Fresh seasonal fruit"},
    {"name": "Vegetables", "description": "Farm fresh vegetables"},
    {"name": "Dairy", "description": "Milk, cheese and eggs"},
    {"name": "Bakery", "description": "Bread and pastries baked daily"},
]

SEED_PRODUCTS = [
    {"name": "Bananas", "price": 0.5, "category": "Fruits", "stock": 120},
    {"name": "Apples", "price": 1.5, "category": "Fruits", "stock": 80},
    {"name": "Carrots", "price": 0.9, "category": "Vegetables", "stock": 60},
    {"name": "Tomatoes", "price": 2.2, "category": "Vegetables", "stock": 45},
    {"name": "Whole Milk", "price": 1.2, "category": "Dairy", "stock": 30},
    {"name": "Cheddar", "price": 4.75, "category": "Dairy", "stock": 20},
    {"name": "Sourdough Loaf", "price": 3.5, "category": "Bakery", "stock": 15},
]

SEED_DISCOUNTS = [
    {"code": "SAVE10", "percentage": 10, "usage_limit": 100},
    {"code": "FRESH20", "percentage": 20, "usage_limit": 25},
]

SEED_BANNERS = [
    {"image_url": "/images/banner-fruits.png", "title": "Summer Fruits", "discount": 15},
]


def _domains(names=None):
    from identity.domain import identity
    from storefront.domain import storefront

    all_domains = {"identity": identity, "storefront": storefront}
    return {d: all_domains[d] for d in names} if names else all_domains


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def seed_identity(identity):
    from protean.utils.globals import current_domain

    from identity.user.registration import RegisterUser, find_user_by_email

    created = 0
    with identity.domain_context():
        for user in SEED_USERS:
            if find_user_by_email(user["email"]) is None:
                current_domain.process(RegisterUser(**user), asynchronous=False)
                created += 1
    return created


def seed_storefront(storefront):
    from protean.utils.globals import current_domain

    from storefront.catalogue.banner import Banner, CreateBanner
    from storefront.catalogue.category import Category, CreateCategory
    from storefront.catalogue.management import AddProduct
    from storefront.catalogue.product import Product
    from storefront.discount.management import CreateDiscount, find_discount

    created = 0
    with storefront.domain_context():
        category_names = {
            c.name.lower() for c in current_domain.repository_for(Category)._dao.query.all().items
        }
        for category in SEED_CATEGORIES:
            if category["name"].lower() not in category_names:
                current_domain.process(CreateCategory(**category), asynchronous=False)
                created += 1

        product_names = {p.name for p in current_domain.repository_for(Product)._dao.query.all().items}
        for product in SEED_PRODUCTS:
            if product["name"] not in product_names:
                current_domain.process(AddProduct(**product), asynchronous=False)
                created += 1

        for discount in SEED_DISCOUNTS:
            if find_discount(discount["code"]) is None:
                current_domain.process(CreateDiscount(**discount), asynchronous=False)
                created += 1

        if not current_domain.repository_for(Banner)._dao.query.all().items:
            for banner in SEED_BANNERS:
                current_domain.process(CreateBanner(**banner), asynchronous=False)
                created += 1
    return created


def seed(domains=None):
    """Load demo data. Records that already exist are left alone."""
    seeders = {"identity": seed_identity, "storefront": seed_storefront}

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        created = seeders[name](domain)
        print(f"  {name}: {created} record(s) created.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="FreshCart database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("setup-db", "Create all database tables"),
        ("drop-db", "Drop all database tables"),
        ("seed", "Load demo users, groceries and discount codes"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_CHOICES,
            nargs="*",
            help="Specific domain(s) to target (default: all)",
        )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed":
        seed(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
