# kushalwear/data/seed.py
import argparse
import secrets
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from kushalwear.data.database import Database
from kushalwear.data.models.product import ProductModel
from kushalwear.data.models.user import UserModel
from kushalwear.utils.logging import get_logger
from kushalwear.utils.security import hash_password
from kushalwear.utils.settings import DATABASE_URL

logger = get_logger(__name__)


def _sample_products():
    valid_until = datetime.now(timezone.utc) + timedelta(days=30)
    return [
        dict(
            name="Men's Classic Jacket",
            description="A timeless classic jacket perfect for any occasion. Made with premium materials for comfort and style.",
            price=Decimal("99.99"),
            original_price=Decimal("129.99"),
            category="men",
            subcategory="jackets",
            images=["images/OIP (1).jpg"],
            main_image="images/OIP (1).jpg",
            sizes=["S", "M", "L", "XL"],
            colors=[
                {"name": "Navy Blue", "hex": "#1e3a8a"},
                {"name": "Black", "hex": "#000000"},
                {"name": "Charcoal", "hex": "#374151"},
            ],
            stock=50,
            material="Premium Cotton Blend",
            care="Machine wash cold, tumble dry low",
            tags=["jacket", "men", "classic", "premium"],
            rating_average=4.5,
            rating_count=12,
            is_featured=True,
            discount_percentage=23,
            discount_valid_until=valid_until,
        ),
        dict(
            name="Women's Elegant Dress",
            description="An elegant dress that combines sophistication with comfort. Perfect for special occasions.",
            price=Decimal("129.99"),
            original_price=Decimal("159.99"),
            category="women",
            subcategory="dresses",
            images=["images/R (1).jpg"],
            main_image="images/R (1).jpg",
            sizes=["XS", "S", "M", "L", "XL"],
            colors=[
                {"name": "Rose Gold", "hex": "#b76e79"},
                {"name": "Emerald", "hex": "#10b981"},
                {"name": "Sapphire", "hex": "#3b82f6"},
            ],
            stock=35,
            material="Silk Blend",
            care="Dry clean only",
            tags=["dress", "women", "elegant", "formal"],
            rating_average=4.8,
            rating_count=8,
            is_featured=True,
            discount_percentage=19,
            discount_valid_until=valid_until,
        ),
        dict(
            name="Casual Comfort Shirt",
            description="A comfortable and stylish casual shirt perfect for everyday wear. Breathable fabric for all-day comfort.",
            price=Decimal("59.99"),
            original_price=Decimal("79.99"),
            category="men",
            subcategory="shirts",
            images=["images/shrit.jpg"],
            main_image="images/shrit.jpg",
            sizes=["S", "M", "L", "XL", "XXL"],
            colors=[
                {"name": "White", "hex": "#ffffff"},
                {"name": "Light Blue", "hex": "#93c5fd"},
            ],
            stock=75,
            material="100% Cotton",
            care="Machine wash warm",
            tags=["shirt", "men", "casual", "comfort"],
            rating_average=4.3,
            rating_count=20,
            discount_percentage=25,
            discount_valid_until=valid_until,
        ),
        dict(
            name="Elegant Evening Dress",
            description="A stunning evening dress that will make you the center of attention. Perfect for formal events and parties.",
            price=Decimal("149.99"),
            original_price=Decimal("199.99"),
            category="women",
            subcategory="dresses",
            images=["images/pretty.jpg"],
            main_image="images/pretty.jpg",
            sizes=["XS", "S", "M", "L"],
            colors=[
                {"name": "Black", "hex": "#000000"},
                {"name": "Red", "hex": "#dc2626"},
                {"name": "Navy", "hex": "#1e3a8a"},
            ],
            stock=20,
            material="Premium Silk",
            care="Dry clean only",
            tags=["dress", "women", "evening", "formal", "elegant"],
            rating_average=4.9,
            rating_count=15,
            is_featured=True,
            discount_percentage=25,
            discount_valid_until=valid_until,
        ),
    ]


def seed_products(db: Session) -> int:
    """Dodaje przykladowe produkty, pomija te ktore juz sa (po nazwie)."""
    samples = _sample_products()
    existing = set(
        db.scalars(select(ProductModel.name).where(ProductModel.name.in_([s["name"] for s in samples])))
    )

    added = 0
    for data in samples:
        if data["name"] in existing:
            logger.info(f"Product already exists: {data['name']}")
            continue
        db.add(ProductModel(brand="KushalWear", is_active=True, **data))
        added += 1

    db.commit()
    logger.info(f"Added {added} sample products")
    return added


def create_admin(db: Session, email: str, password: str, name: str = "Admin") -> UserModel:
    """Tworzy admina albo awansuje istniejace konto."""
    email = email.lower()
    user = db.scalar(select(UserModel).where(UserModel.email == email))

    if user:
        user.role = "admin"
        user.name = name
        logger.info(f"Existing user {email} updated to admin")
    else:
        user = UserModel(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role="admin",
            is_active=True,
        )
        db.add(user)
        logger.info(f"Admin user {email} created")

    db.commit()
    db.refresh(user)
    return user


def generate_secret() -> str:
    return secrets.token_hex(64)


def main(argv=None):
    parser = argparse.ArgumentParser(description="KushalWear data tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("products", help="Add sample products")

    admin = sub.add_parser("admin", help="Create or promote an admin user")
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--name", default="Admin")

    sub.add_parser("secret", help="Print a random JWT secret")

    args = parser.parse_args(argv)

    if args.command == "secret":
        print(generate_secret())
        return

    database = Database(DATABASE_URL)
    database.create_all()
    db = database.session()
    try:
        if args.command == "products":
            seed_products(db)
        elif args.command == "admin":
            create_admin(db, args.email, args.password, args.name)
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
