"""Django app configuration for the wishlist app."""

from django.apps import AppConfig


class WishlistConfig(AppConfig):
    """AppConfig for saved-for-later products."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "wishlist"
