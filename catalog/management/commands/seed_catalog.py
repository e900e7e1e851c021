"""Seed a small catalog for local development.

Creates a two-level category tree and a handful of products with stock.
Re-running is idempotent; existing rows are reused by slug/sku.
"""

from decimal import Decimal

from catalog.models import Category, Product
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify

CATEGORIES = [
    # (name, parent name, description)
    ("Bags", None, "Totes, backpacks and pouches"),
    ("Totes", "Bags", "Everyday carry-alls"),
    ("Kitchen", None, "Mugs and tableware"),
]

PRODUCTS = [
    {
        "name": "Canvas Tote",
        "sku": "SKU-TOTE0001",
        "category": "Totes",
        "price": Decimal("30.00"),
        "sale_price": Decimal("24.99"),
        "stock_quantity": 25,
        "featured": True,
    },
    {
        "name": "Roll-top Backpack",
        "sku": "SKU-BACK0001",
        "category": "Bags",
        "price": Decimal("89.00"),
        "sale_price": None,
        "stock_quantity": 8,
        "featured": False,
    },
    {
        "name": "Stoneware Mug",
        "sku": "SKU-MUG00001",
        "category": "Kitchen",
        "price": Decimal("14.50"),
        "sale_price": None,
        "stock_quantity": 0,
        "featured": False,
    },
]


class Command(BaseCommand):
    help = "Seed development catalog data (categories and products)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        categories = {}
        for name, parent_name, description in CATEGORIES:
            category, _ = Category.objects.get_or_create(
                slug=slugify(name),
                defaults={
                    "name": name,
                    "description": description,
                    "parent": categories.get(parent_name),
                    "is_active": True,
                },
            )
            categories[name] = category

        created = 0
        for entry in PRODUCTS:
            fields = dict(entry)
            category = categories[fields.pop("category")]
            _, was_created = Product.objects.get_or_create(
                sku=fields.pop("sku"),
                defaults={**fields, "slug": slugify(entry["name"]), "category": category},
            )
            created += int(was_created)

        self.stdout.write(
            self.style.SUCCESS(f"Catalog ready: {len(categories)} categories, {created} new product(s).")
        )
