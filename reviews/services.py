"""Review services: create, edit and delete a user's own reviews."""

import logging

from catalog.models import Product
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404

from .models import Review
from .selectors import review_eligibility

logger = logging.getLogger("storefront.reviews")

EDITABLE_FIELDS = ("rating", "title", "comment")


class ReviewError(Exception):
    """Raised for review mutation failures."""


class AlreadyReviewed(ReviewError):
    pass


class PurchaseRequired(ReviewError):
    pass


class ReviewNotFound(ReviewError):
    pass


def create_review(*, user, product_id: int, rating: int, title: str = "", comment: str = "") -> Review:
    """Record the user's review of a product they received.

    One review per user and product; a delivered order containing the
    product is required.
    """

    product = get_object_or_404(Product, id=product_id)
    eligibility = review_eligibility(user=user, product_id=product.id)
    if eligibility.has_reviewed:
        raise AlreadyReviewed(eligibility.reason)
    if not eligibility.has_purchased:
        raise PurchaseRequired(eligibility.reason)

    try:
        with transaction.atomic():
            review = Review.objects.create(
                user=user,
                product=product,
                rating=rating,
                title=title or "",
                comment=comment or "",
            )
    except IntegrityError:
        # A concurrent request created it first
        raise AlreadyReviewed("You have already reviewed this product")

    logger.info(
        "review.created",
        extra={
            "event": "review.created",
            "review_id": review.id,
            "user_id": getattr(user, "id", None),
            "product_id": product.id,
            "rating": review.rating,
        },
    )
    return review


def _own_review(*, user, review_id: int, lock: bool = False) -> Review:
    qs = Review.objects.select_for_update() if lock else Review.objects.all()
    review = qs.filter(id=review_id, user=user).first()
    if review is None:
        raise ReviewNotFound("Review not found")
    return review


@transaction.atomic
def update_review(*, user, review_id: int, **changes) -> Review:
    """Apply rating/title/comment changes to one of the user's reviews."""

    review = _own_review(user=user, review_id=review_id, lock=True)
    fields = []
    for name in EDITABLE_FIELDS:
        if name in changes:
            # title and comment may be sent as null to clear them
            setattr(review, name, "" if changes[name] is None else changes[name])
            fields.append(name)
    if fields:
        review.save(update_fields=fields + ["updated_at"])
        logger.info(
            "review.updated",
            extra={
                "event": "review.updated",
                "review_id": review.id,
                "user_id": getattr(user, "id", None),
                "fields": fields,
            },
        )
    return review


def delete_review(*, user, review_id: int) -> None:
    deleted, _ = Review.objects.filter(id=review_id, user=user).delete()
    if not deleted:
        raise ReviewNotFound("Review not found")
    logger.info(
        "review.deleted",
        extra={"event": "review.deleted", "review_id": review_id, "user_id": getattr(user, "id", None)},
    )
