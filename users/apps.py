"""Django app configuration for the users app."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Accounts that own carts, wishlists and orders."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
    verbose_name = "Accounts"
