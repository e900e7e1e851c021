"""Admin registration for catalog models."""

from django.contrib import admin, messages

from .models import Category, Product
from .services import delete_product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "parent", "is_active", "sort_order")
    search_fields = ("name", "slug")
    list_filter = ("is_active", "parent")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "price", "sale_price", "stock_quantity", "is_active", "featured")
    search_fields = ("name", "slug", "sku")
    list_filter = ("is_active", "featured", "category")
    list_select_related = ("category",)
    prepopulated_fields = {"slug": ("name",)}
    # Stock moves through the inventory ledger only
    readonly_fields = ("stock_quantity",)
    actions = ["remove_products"]

    def get_actions(self, request):
        actions = super().get_actions(request)
        # Bulk delete would bypass the ordered-product check
        actions.pop("delete_selected", None)
        return actions

    @admin.action(description="Delete selected products (deactivate when ordered)")
    def remove_products(self, request, queryset):
        outcomes = [delete_product(product=product) for product in queryset]
        deactivated = sum(1 for outcome in outcomes if outcome == "deactivated")
        self.message_user(
            request,
            f"Deleted {len(outcomes) - deactivated}, deactivated {deactivated} product(s).",
            messages.SUCCESS,
        )
