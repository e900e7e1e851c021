"""Shared enumerations and choices used across apps."""

from django.db import models


class MovementType(models.TextChoices):
    RESERVE = "reserve", "Reserve"
    RELEASE = "release", "Release"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders."""

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class DeleteOutcome(models.TextChoices):
    """Result of a delete request that may fall back to deactivation."""

    DELETED = "deleted", "Deleted"
    DEACTIVATED = "deactivated", "Deactivated"


class PaymentMethod(models.TextChoices):
    """Payment method label recorded on an order; no payment is processed."""

    CREDIT_CARD = "credit_card", "Credit card"
    PAYPAL = "paypal", "PayPal"
    BANK_TRANSFER = "bank_transfer", "Bank transfer"
