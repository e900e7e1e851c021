"""Read-only review queries and rating statistics."""

from dataclasses import dataclass

from common.choices import OrderStatus
from django.db.models import Avg, Count, QuerySet
from orders.models import OrderItem

from .models import MAX_RATING, MIN_RATING, Review


@dataclass
class ReviewEligibility:
    has_reviewed: bool
    has_purchased: bool

    @property
    def can_review(self) -> bool:
        return self.has_purchased and not self.has_reviewed

    @property
    def reason(self) -> str:
        if self.has_reviewed:
            return "You have already reviewed this product"
        if not self.has_purchased:
            return "You can only review products you have received"
        return "You can review this product"


def approved_reviews_for_product(*, product_id: int, rating: int | None = None) -> QuerySet[Review]:
    qs = Review.objects.filter(product_id=product_id, is_approved=True).select_related("user")
    if rating is not None:
        qs = qs.filter(rating=rating)
    return qs


def reviews_for_user(*, user) -> QuerySet[Review]:
    return Review.objects.filter(user=user).select_related("product")


def has_purchased(*, user, product_id: int) -> bool:
    """True when one of the user's delivered orders contains the product."""
    return OrderItem.objects.filter(
        order__user=user,
        order__status=OrderStatus.DELIVERED,
        product_id=product_id,
    ).exists()


def review_eligibility(*, user, product_id: int) -> ReviewEligibility:
    return ReviewEligibility(
        has_reviewed=Review.objects.filter(user=user, product_id=product_id).exists(),
        has_purchased=has_purchased(user=user, product_id=product_id),
    )


def review_statistics(*, product_id: int) -> dict:
    """Average, total and per-star breakdown over approved reviews."""

    qs = Review.objects.filter(product_id=product_id, is_approved=True)
    summary = qs.aggregate(average=Avg("rating"), total=Count("id"))
    total = summary["total"] or 0
    counts = {row["rating"]: row["n"] for row in qs.order_by().values("rating").annotate(n=Count("id"))}
    breakdown = []
    for rating in range(MAX_RATING, MIN_RATING - 1, -1):
        count = counts.get(rating, 0)
        breakdown.append(
            {
                "rating": rating,
                "count": count,
                "percentage": round(count * 100 / total) if total else 0,
            }
        )
    average = summary["average"]
    return {
        "average_rating": round(float(average), 1) if average is not None else None,
        "total_reviews": total,
        "rating_breakdown": breakdown,
    }
