"""User models for authentication and account ownership.

The custom `User` extends Django's `AbstractUser` with a unique,
normalized email. Carts, wishlists and orders are owned by a user.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user with a unique email.

    `is_active` doubles as the soft-delete flag: a user who already placed
    orders is deactivated instead of being removed.
    """

    email = models.EmailField(unique=True)

    def save(self, *args, **kwargs):
        """Normalize email so uniqueness checks are reliable."""
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        full = self.get_full_name()
        return full or self.username
