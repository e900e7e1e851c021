"""Inventory models (single-location).

Stock on hand lives on `catalog.Product.stock_quantity`; every change made
by the stock ledger is mirrored here as an audit movement.
"""

from common.choices import MovementType
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockMovement(TimeStampedModel):
    TYPE_RESERVE = MovementType.RESERVE
    TYPE_RELEASE = MovementType.RELEASE
    TYPE_CHOICES = MovementType.choices

    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="stock_movements")
    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    quantity = models.IntegerField()  # signed: -reserve, +release
    reason = models.CharField(max_length=200, blank=True)
    reference = models.CharField(max_length=120, blank=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="movement_non_zero", condition=~models.Q(quantity=0)),
        ]
        indexes = [
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
            models.Index(fields=["reference"], name="movement_reference_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.movement_type} {self.quantity} for product {self.product_id}"


# EOF
