"""User account services used by the admin back-office."""

import logging

from common.choices import DeleteOutcome
from django.db import transaction

from .models import User

logger = logging.getLogger("storefront.users")


class UserDeletionError(Exception):
    """Raised when a user account may not be removed."""


@transaction.atomic
def delete_user(*, user: User, acting_user=None) -> str:
    """Delete a user, or deactivate them when they own orders.

    Order history must survive, so an account with orders is only marked
    inactive. Returns a `DeleteOutcome` value.
    """

    if acting_user is not None and getattr(acting_user, "id", None) == user.id:
        raise UserDeletionError("You cannot delete your own account")

    user_id = user.id
    if user.orders.exists():
        user.is_active = False
        user.save(update_fields=["is_active"])
        outcome = DeleteOutcome.DEACTIVATED
    else:
        user.delete()
        outcome = DeleteOutcome.DELETED

    logger.info(
        "user.deleted",
        extra={
            "event": "user.deleted",
            "user_id": user_id,
            "outcome": str(outcome),
            "acting_user_id": getattr(acting_user, "id", None),
        },
    )
    return outcome
