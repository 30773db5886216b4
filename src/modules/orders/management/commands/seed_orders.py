from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.orders.constants import OrderCategory
from modules.orders.models import Order

# Inserted as-is: seed rows are not subject to creation rules.
SAMPLE_ORDERS = [
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "isbn": "9780743273565",
        "category": OrderCategory.FICTION,
        "price": Decimal("14.99"),
        "published_date": date(1925, 4, 10),
        "cover_image_url": "https://example.com/gatsby.jpg",
        "stock_quantity": 25,
    },
    {
        "title": "Clean Code",
        "author": "Robert C. Martin",
        "isbn": "9780132350884",
        "category": OrderCategory.TECHNICAL,
        "price": Decimal("45.99"),
        "published_date": date(2008, 8, 1),
        "cover_image_url": "https://example.com/cleancode.jpg",
        "stock_quantity": 8,
    },
    {
        "title": "Where the Wild Things Are",
        "author": "Maurice Sendak",
        "isbn": "9780060254926",
        "category": OrderCategory.CHILDREN,
        "price": Decimal("18.99"),
        "published_date": date(1963, 5, 9),
        "cover_image_url": None,
        "stock_quantity": 12,
    },
]


class Command(BaseCommand):
    help = "Seed an empty orders table with sample orders."

    def handle(self, *args, **options):
        if Order.objects.exists():
            self.stdout.write("Orders already present, skipping seed.")
            return

        with transaction.atomic():
            Order.objects.bulk_create(Order(**data) for data in SAMPLE_ORDERS)

        self.stdout.write(
            self.style.SUCCESS(f"Seed completed: orders={len(SAMPLE_ORDERS)}")
        )
