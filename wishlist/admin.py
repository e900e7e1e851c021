from django.contrib import admin

from .models import WishlistItem


@admin.register(WishlistItem)
class WishlistItemAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "product", "created_at")
    search_fields = ("product__sku", "product__name", "user__email")
    raw_id_fields = ("user", "product")
    list_select_related = ("user", "product")
