"""Catalog app models.

Defines the catalog entities the ordering core depends on: a category tree
and products carrying price, sale price and on-hand stock.
"""

import secrets
import string
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Category(TimeStampedModel):
    """Hierarchical product categorization (parent pointer)."""

    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True)
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        related_name="children",
        on_delete=models.SET_NULL,
    )
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    def clean(self):
        from .services import CategoryTreeError, validate_category_parent

        super().clean()
        try:
            validate_category_parent(category=self, parent=self.parent)
        except CategoryTreeError as exc:
            raise ValidationError({"parent": str(exc)})

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


def generate_sku() -> str:
    """Return a random SKU such as `SKU-7QK2M9XA`."""
    alphabet = string.ascii_uppercase + string.digits
    return "SKU-" + "".join(secrets.choice(alphabet) for _ in range(8))


class Product(TimeStampedModel):
    """Sellable product with price, optional sale price and stock on hand.

    `stock_quantity` is only changed through `inventory.services`; the
    check constraint is the database-level backstop against overdraft.
    """

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    sku = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True)
    short_description = models.CharField(max_length=500, blank=True)
    category = models.ForeignKey(
        Category,
        null=True,
        blank=True,
        related_name="products",
        on_delete=models.SET_NULL,
    )
    price = models.DecimalField(max_digits=10, decimal_places=2)
    sale_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    stock_quantity = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)
    featured = models.BooleanField(default=False)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(name="product_stock_non_negative", condition=models.Q(stock_quantity__gte=0)),
            models.CheckConstraint(name="product_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(
                name="product_sale_price_non_negative",
                condition=models.Q(sale_price__gte=0) | models.Q(sale_price__isnull=True),
            ),
        ]
        indexes = [
            models.Index(fields=["is_active", "stock_quantity"], name="product_active_stock_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} [{self.sku}]"

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = slugify(self.name)
        if not self.sku:
            self.sku = generate_sku()
        super().save(*args, **kwargs)

    @property
    def is_on_sale(self) -> bool:
        return self.sale_price is not None and self.sale_price < self.price

    @property
    def effective_price(self) -> Decimal:
        """Sale price when set and lower than the list price, else price."""
        if self.is_on_sale:
            return self.sale_price
        return self.price

    @property
    def discount_percentage(self):
        if not self.is_on_sale or not self.price:
            return None
        ratio = (self.price - self.sale_price) / self.price * Decimal("100")
        return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def is_in_stock(self) -> bool:
        return self.stock_quantity > 0

    def is_available(self, quantity: int = 1) -> bool:
        return bool(self.is_active) and int(self.stock_quantity) >= int(quantity)
