"""Reviews models: one rating per user and product."""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MIN_RATING = 1
MAX_RATING = 5


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Review(TimeStampedModel):
    """A customer's rating and optional comment for a product.

    `is_approved` hides a review from the public listing; new reviews are
    visible straight away.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="reviews", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="reviews", on_delete=models.CASCADE)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)]
    )
    title = models.CharField(max_length=255, blank=True)
    comment = models.TextField(max_length=1000, blank=True)
    is_approved = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="unique_review_per_user_product"),
            models.CheckConstraint(
                name="review_rating_range",
                condition=models.Q(rating__gte=MIN_RATING) & models.Q(rating__lte=MAX_RATING),
            ),
        ]
        indexes = [
            models.Index(fields=["product", "is_approved", "rating"], name="review_product_approved_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Review#{self.id} user={self.user_id} product={self.product_id} rating={self.rating}"

    @property
    def user_name(self) -> str:
        if not self.user_id:
            return "Anonymous"
        return self.user.get_full_name() or self.user.username
