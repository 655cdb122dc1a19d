#!/usr/bin/env python3
"""Seed the database with a starter catalog of styles, stylists, categories and products."""
import sys
from decimal import Decimal
from pathlib import Path

# Add the parent directory to the path so we can import the app
sys.path.insert(0, str(Path(__file__).parent.parent))

from braids import create_app
from braids.extensions import db
from braids.models import Category, Product, Style, Stylist

CATEGORIES = [
    {"name": "Extensions", "description": "Synthetic and human hair for braiding", "display_order": 1},
    {"name": "Hair Care", "description": "Oils, creams and shampoos", "display_order": 2},
    {"name": "Accessories", "description": "Cuffs, beads and pins", "display_order": 3},
    {"name": "Tools", "description": "Combs, needles and clips", "display_order": 4},
]

STYLES = [
    {
        "name": "Knotless Box Braids",
        "description": "Lightweight protective braids that start with natural hair",
        "category": "Long",
        "difficulty_level": "Advanced",
        "estimated_time": 360,
    },
    {
        "name": "Feed-in Cornrows",
        "description": "Classic cornrows with added volume for a sleek style",
        "category": "Classic",
        "difficulty_level": "Intermediate",
        "estimated_time": 120,
    },
    {
        "name": "Passion Twists",
        "description": "Bohemian twist style with a soft, natural texture",
        "category": "Modern",
        "difficulty_level": "Intermediate",
        "estimated_time": 240,
    },
]

STYLISTS = [
    {
        "name": "Amara Okafor",
        "specialty": "Box braids and knotless braids",
        "description": "Ten years of experience with protective styles for all hair types.",
        "is_featured": True,
    },
    {
        "name": "Lucia Mendes",
        "specialty": "Cornrows, kids braids",
        "description": "Gentle, quick and precise with children's styles and cornrow designs.",
    },
]

PRODUCTS = [
    {
        "name": "Kanekalon Braiding Hair",
        "description": "Pre-stretched synthetic extensions, pack of three",
        "price": Decimal("12.99"),
        "stock_quantity": 120,
        "category": "Extensions",
        "sku": "EXT-KAN-001",
    },
    {
        "name": "Scalp Nourishing Oil",
        "description": "Lightweight oil for dry scalp under braids",
        "price": Decimal("15.50"),
        "stock_quantity": 60,
        "category": "Care",
        "sku": "CARE-OIL-001",
    },
    {
        "name": "Rat Tail Parting Comb",
        "description": "Carbon comb for precise parting",
        "price": Decimal("4.25"),
        "stock_quantity": 200,
        "category": "Tools",
        "sku": "TOOL-CMB-001",
    },
]


def _seed(model, rows, key="name"):
    added = 0
    for row in rows:
        exists = db.session.scalars(
            db.select(model).filter_by(**{key: row[key]})
        ).first()
        if exists is not None:
            print(f"  skip {model.__tablename__}: {row[key]} already present")
            continue
        db.session.add(model(**row))
        added += 1
    return added


def seed_catalog(app=None) -> dict[str, int]:
    """Insert the starter catalog; rows that already exist are left untouched."""
    app = app or create_app()

    with app.app_context():
        counts = {
            "categories": _seed(Category, CATEGORIES),
            "styles": _seed(Style, STYLES),
            "stylists": _seed(Stylist, STYLISTS),
            "products": _seed(Product, PRODUCTS, key="sku"),
        }
        db.session.commit()

    for table, added in counts.items():
        print(f"Added {added} {table}")
    return counts


if __name__ == "__main__":
    seed_catalog()
