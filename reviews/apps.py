"""Django app configuration for the reviews app."""

from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    """AppConfig for product ratings left by customers who received the product."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "reviews"
    verbose_name = "Product reviews"
