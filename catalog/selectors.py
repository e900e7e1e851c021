"""Selectors for the catalog domain.

Read-only query helpers for the public catalog endpoints. Only active
products and categories are ever exposed to shoppers.
"""

from typing import Iterable, Optional

from django.db.models import QuerySet

from .models import Category, Product


def list_categories(ordering: Optional[Iterable[str]] = None) -> QuerySet[Category]:
    """Return active categories, by default ordered by ``sort_order`` then ``name``."""

    ordering = list(ordering or ("sort_order", "name"))
    return Category.objects.filter(is_active=True).order_by(*ordering)


def list_products(*, category_slug: Optional[str] = None) -> QuerySet[Product]:
    """Return active products with their category joined."""

    qs = Product.objects.filter(is_active=True).select_related("category")
    if category_slug:
        qs = qs.filter(category__slug=category_slug, category__is_active=True)
    return qs.order_by("name")
