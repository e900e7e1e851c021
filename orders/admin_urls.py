"""Staff order routes."""

from django.urls import path

from .admin_views import AdminOrderBulkStatusView, AdminOrderDetailView, AdminOrderListView, AdminOrderStatusView

urlpatterns = [
    path("", AdminOrderListView.as_view(), name="admin-order-list"),
    path("bulk-status/", AdminOrderBulkStatusView.as_view(), name="admin-order-bulk-status"),
    path("<str:order_number>/", AdminOrderDetailView.as_view(), name="admin-order-detail"),
    path("<str:order_number>/status/", AdminOrderStatusView.as_view(), name="admin-order-status"),
]
