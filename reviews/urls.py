"""Review URL routes (v1)."""

from django.urls import path

from .views import MyReviewsView, ProductReviewsView, ReviewDetailView, ReviewEligibilityView

app_name = "reviews"

urlpatterns = [
    path("mine/", MyReviewsView.as_view(), name="reviews-mine"),
    path("products/<int:product_id>/", ProductReviewsView.as_view(), name="product-reviews"),
    path("products/<int:product_id>/can-review/", ReviewEligibilityView.as_view(), name="review-eligibility"),
    path("<int:review_id>/", ReviewDetailView.as_view(), name="review-detail"),
]
