"""Read-only viewsets for the public catalog."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from . import selectors
from .models import Product
from .serializers import CategorySerializer, ProductDetailSerializer, ProductSummarySerializer
from .throttling import CatalogScopedRateThrottle


@extend_schema_view(
    list=extend_schema(
        summary="List categories",
        description="Returns active categories ordered by sort_order then name",
        tags=["Catalog Endpoints"],
    ),
    retrieve=extend_schema(summary="Get category by slug", tags=["Catalog Endpoints"]),
)
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CategorySerializer
    lookup_field = "slug"
    throttle_scope = "catalog"
    throttle_classes = [CatalogScopedRateThrottle, UserRateThrottle, AnonRateThrottle]

    def get_queryset(self):
        return selectors.list_categories()

    @extend_schema(tags=["Catalog Endpoints"], summary="List products in category")
    @action(detail=True, methods=["get"], url_path="products")
    def products(self, request, slug=None):
        category = self.get_object()
        qs = selectors.list_products(category_slug=category.slug)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(ProductSummarySerializer(page, many=True).data)
        return Response(ProductSummarySerializer(qs, many=True).data)


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category__slug")
    featured = filters.BooleanFilter()
    in_stock = filters.BooleanFilter(method="filter_in_stock")
    min_price = filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["category", "featured", "in_stock", "min_price", "max_price"]

    def filter_in_stock(self, queryset, name, value):
        if value:
            return queryset.filter(stock_quantity__gt=0)
        return queryset.filter(stock_quantity=0)


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description="Returns active products. Supports filtering, ordering by `name`, `price` or `created_at`.",
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category slug"),
            OpenApiParameter("in_stock", OpenApiTypes.BOOL, location="query", description="Only in-stock products"),
        ],
    ),
    retrieve=extend_schema(summary="Get product by slug", tags=["Catalog Endpoints"]),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    lookup_field = "slug"
    lookup_value_regex = "[^/]+"
    filterset_class = ProductFilterSet
    throttle_scope = "catalog"
    throttle_classes = [CatalogScopedRateThrottle, UserRateThrottle, AnonRateThrottle]
    filter_backends = [filters.DjangoFilterBackend, drf_filters.OrderingFilter, drf_filters.SearchFilter]
    ordering_fields = ["name", "price", "created_at"]
    search_fields = ["name", "sku", "short_description"]

    def get_queryset(self):
        return selectors.list_products()

    def get_serializer_class(self):
        return ProductDetailSerializer if self.action == "retrieve" else ProductSummarySerializer
