"""Cart URL routes (v1)."""

from django.urls import path

from .views import (
    CartAddItemView,
    CartClearView,
    CartDetailView,
    CartItemView,
    CartSummaryView,
    CartValidateView,
)

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("summary/", CartSummaryView.as_view(), name="cart-summary"),
    path("validate/", CartValidateView.as_view(), name="cart-validate"),
    path("items/", CartAddItemView.as_view(), name="cart-add-item"),
    path("items/<int:item_id>/", CartItemView.as_view(), name="cart-item"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
]
