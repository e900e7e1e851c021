"""Wishlist URL routes (v1)."""

from django.urls import path

from .views import (
    WishlistCheckView,
    WishlistClearView,
    WishlistItemDeleteView,
    WishlistMoveToCartView,
    WishlistProductDeleteView,
    WishlistView,
)

app_name = "wishlist"

urlpatterns = [
    path("", WishlistView.as_view(), name="wishlist"),
    path("clear/", WishlistClearView.as_view(), name="wishlist-clear"),
    path("check/<int:product_id>/", WishlistCheckView.as_view(), name="wishlist-check"),
    path("products/<int:product_id>/", WishlistProductDeleteView.as_view(), name="wishlist-remove-product"),
    path("<int:item_id>/", WishlistItemDeleteView.as_view(), name="wishlist-remove-item"),
    path("<int:item_id>/move-to-cart/", WishlistMoveToCartView.as_view(), name="wishlist-move-to-cart"),
]
