"""Admin viewsets for catalog write endpoints.

Endpoints are restricted to staff users and use scoped throttling.
"""

from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from .admin_serializers import CategoryAdminSerializer, ProductAdminSerializer
from .models import Category, Product
from .services import delete_product


class AdminBaseViewSet(viewsets.ModelViewSet):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "catalog_admin_write"


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List categories (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get category (admin)"),
    create=extend_schema(tags=["Admin Endpoints"], summary="Create category"),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update category"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update category"),
    destroy=extend_schema(tags=["Admin Endpoints"], summary="Delete category"),
)
class CategoryAdminViewSet(AdminBaseViewSet):
    queryset = Category.objects.all().order_by("sort_order", "name")
    serializer_class = CategoryAdminSerializer


@extend_schema_view(
    list=extend_schema(tags=["Admin Endpoints"], summary="List products (admin)"),
    retrieve=extend_schema(tags=["Admin Endpoints"], summary="Get product (admin)"),
    create=extend_schema(tags=["Admin Endpoints"], summary="Create product"),
    update=extend_schema(tags=["Admin Endpoints"], summary="Update product"),
    partial_update=extend_schema(tags=["Admin Endpoints"], summary="Partial update product"),
    destroy=extend_schema(
        tags=["Admin Endpoints"],
        summary="Delete product",
        description="Deletes the product, or deactivates it when it appears on existing orders.",
        examples=[
            OpenApiExample("Deleted", value={"action": "deleted"}, response_only=True),
            OpenApiExample("Deactivated", value={"action": "deactivated"}, response_only=True),
        ],
    ),
)
class ProductAdminViewSet(AdminBaseViewSet):
    queryset = Product.objects.select_related("category").order_by("name")
    serializer_class = ProductAdminSerializer

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        outcome = delete_product(product=product)
        return Response({"action": str(outcome)}, status=status.HTTP_200_OK)
