"""Admin registration for cart lines.

Support staff can inspect carts and run the same reconciliation a shopper
would trigger by viewing their cart.
"""

from django.contrib import admin, messages
from django.contrib.auth import get_user_model

from .models import CartItem
from .services import clear_cart, reconcile_cart


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "product", "quantity", "updated_at")
    search_fields = ("product__sku", "product__name", "user__email")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("user", "product")
    list_select_related = ("user", "product")

    @admin.action(description="Reconcile owners' carts (remove unavailable lines)")
    def action_reconcile(self, request, queryset):
        User = get_user_model()
        removed = 0
        for user in User.objects.filter(id__in=queryset.values("user_id")):
            removed += reconcile_cart(user=user).removed_count
        messages.success(request, f"Removed {removed} unavailable line(s).")

    @admin.action(description="Clear owners' carts")
    def action_clear(self, request, queryset):
        User = get_user_model()
        removed = 0
        for user in User.objects.filter(id__in=queryset.values("user_id")):
            removed += clear_cart(user=user)
        messages.success(request, f"Cleared {removed} line(s).")

    actions = ["action_reconcile", "action_clear"]


# EOF
