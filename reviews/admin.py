from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "user", "rating", "is_approved", "created_at")
    list_filter = ("rating", "is_approved", "created_at")
    search_fields = ("product__sku", "product__name", "user__email", "title")
    raw_id_fields = ("user", "product")
    list_select_related = ("user", "product")
