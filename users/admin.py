"""Admin registration for the custom User model."""

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from .models import User
from .services import UserDeletionError, delete_user


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Default fieldsets plus order counts; removal goes through `delete_user`."""

    list_display = ("username", "email", "is_staff", "is_active", "order_count", "date_joined")
    list_filter = ("is_staff", "is_active")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("-date_joined",)
    readonly_fields = ("last_login", "date_joined")
    actions = ["remove_users"]

    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("username", "email", "password1", "password2")}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_order_count=Count("orders"))

    @admin.display(description="Orders", ordering="_order_count")
    def order_count(self, obj):
        return obj._order_count

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop("delete_selected", None)
        return actions

    @admin.action(description="Delete selected users (deactivate when they have orders)")
    def remove_users(self, request, queryset):
        for user in queryset:
            try:
                outcome = delete_user(user=user, acting_user=request.user)
            except UserDeletionError as exc:
                self.message_user(request, f"{user.username}: {exc}", messages.WARNING)
                continue
            self.message_user(request, f"{user.username}: {outcome}", messages.SUCCESS)
