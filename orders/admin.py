from django.contrib import admin, messages

from .models import IdempotencyKey, Order, OrderItem
from .services import InvalidStatusTransition, cancel_order


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product", "product_name", "quantity", "price", "total")
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "order_number", "status", "user", "total_amount", "payment_method", "created_at")
    list_filter = ("status", "payment_method", "created_at")
    search_fields = ("order_number", "user__email")
    date_hierarchy = "created_at"
    # Status changes must go through the services so stock stays consistent
    readonly_fields = ("order_number", "user", "status", "total_amount", "payment_method", "created_at", "updated_at")
    inlines = [OrderItemInline]
    list_select_related = ("user",)

    @admin.action(description="Cancel selected orders (restores stock)")
    def action_cancel(self, request, queryset):
        cancelled = 0
        for order in queryset:
            try:
                cancel_order(order=order, acting_user=request.user)
                cancelled += 1
            except InvalidStatusTransition as exc:
                messages.warning(request, f"{order.order_number}: {exc}")
        if cancelled:
            messages.success(request, f"Cancelled {cancelled} order(s).")

    actions = ["action_cancel"]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product", "quantity", "price", "total")
    search_fields = ("order__order_number", "product__sku", "product_name")
    raw_id_fields = ("order", "product")


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "scope", "path", "method", "response_code", "created_at")
    list_filter = ("method", "response_code", "created_at")
    search_fields = ("key", "scope", "path")
    date_hierarchy = "created_at"
