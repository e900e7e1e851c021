"""DRF views for product reviews."""

from catalog.models import Product
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import approved_reviews_for_product, review_eligibility, review_statistics, reviews_for_user
from .serializers import MyReviewSerializer, ReviewListQuerySerializer, ReviewSerializer, ReviewWriteSerializer
from .services import (
    AlreadyReviewed,
    PurchaseRequired,
    ReviewNotFound,
    create_review,
    delete_review,
    update_review,
)

REVIEW_ERROR_STATUS = {
    AlreadyReviewed: status.HTTP_409_CONFLICT,
    PurchaseRequired: status.HTTP_403_FORBIDDEN,
    ReviewNotFound: status.HTTP_404_NOT_FOUND,
}


def review_error_response(exc) -> Response:
    return Response({"detail": str(exc)}, status=REVIEW_ERROR_STATUS[type(exc)])


class ReviewPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "page_size"
    max_page_size = 50


class ProductReviewsView(APIView):
    """Public list of a product's approved reviews; signed-in buyers can add one."""

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated()]
        return [AllowAny()]

    def get_throttles(self):
        self.throttle_scope = "reviews_write" if self.request.method == "POST" else "reviews"
        return super().get_throttles()

    @extend_schema(
        tags=["Review Endpoints"],
        summary="List product reviews",
        description="Approved reviews, newest first by default, with rating statistics.",
        parameters=[
            OpenApiParameter(name="rating", description="Only reviews with this rating", required=False, type=int),
            OpenApiParameter(
                name="ordering",
                description="created_at, -created_at, rating or -rating",
                required=False,
                type=str,
            ),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
        responses={200: ReviewSerializer(many=True)},
    )
    def get(self, request, product_id: int):
        product = get_object_or_404(Product, id=product_id, is_active=True)
        query = ReviewListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reviews = approved_reviews_for_product(
            product_id=product.id, rating=query.validated_data.get("rating")
        ).order_by(query.validated_data["ordering"], "-id")

        paginator = ReviewPagination()
        page = paginator.paginate_queryset(reviews, request, view=self)
        response = paginator.get_paginated_response(ReviewSerializer(page, many=True).data)
        response.data["statistics"] = review_statistics(product_id=product.id)
        return response

    @extend_schema(
        tags=["Review Endpoints"],
        summary="Review a product",
        description="Requires a delivered order containing the product. One review per product.",
        request=ReviewWriteSerializer,
        responses={
            201: ReviewSerializer,
            403: inline_serializer(name="ReviewForbidden", fields={"detail": rf_serializers.CharField()}),
            409: inline_serializer(name="ReviewConflict", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample(
                "Duplicate",
                value={"detail": "You have already reviewed this product"},
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request, product_id: int):
        serializer = ReviewWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            review = create_review(user=request.user, product_id=product_id, **serializer.validated_data)
        except (AlreadyReviewed, PurchaseRequired) as exc:
            return review_error_response(exc)
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class ReviewDetailView(APIView):
    """Edit or delete one of the caller's reviews."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "reviews_write"

    @extend_schema(
        tags=["Review Endpoints"],
        summary="Update own review",
        request=ReviewWriteSerializer(partial=True),
        responses={200: ReviewSerializer},
    )
    def patch(self, request, review_id: int):
        serializer = ReviewWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            review = update_review(user=request.user, review_id=review_id, **serializer.validated_data)
        except ReviewNotFound as exc:
            return review_error_response(exc)
        return Response(ReviewSerializer(review).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Review Endpoints"], summary="Delete own review", responses={204: None})
    def delete(self, request, review_id: int):
        try:
            delete_review(user=request.user, review_id=review_id)
        except ReviewNotFound as exc:
            return review_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MyReviewsView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "reviews"

    @extend_schema(tags=["Review Endpoints"], summary="List my reviews", responses={200: MyReviewSerializer(many=True)})
    def get(self, request):
        paginator = ReviewPagination()
        page = paginator.paginate_queryset(reviews_for_user(user=request.user), request, view=self)
        return paginator.get_paginated_response(MyReviewSerializer(page, many=True).data)


class ReviewEligibilityView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "reviews"

    @extend_schema(
        tags=["Review Endpoints"],
        summary="Check whether the caller can review a product",
        responses={
            200: inline_serializer(
                name="ReviewEligibility",
                fields={
                    "can_review": rf_serializers.BooleanField(),
                    "has_reviewed": rf_serializers.BooleanField(),
                    "has_purchased": rf_serializers.BooleanField(),
                    "reason": rf_serializers.CharField(),
                },
            )
        },
    )
    def get(self, request, product_id: int):
        product = get_object_or_404(Product, id=product_id)
        eligibility = review_eligibility(user=request.user, product_id=product.id)
        return Response(
            {
                "can_review": eligibility.can_review,
                "has_reviewed": eligibility.has_reviewed,
                "has_purchased": eligibility.has_purchased,
                "reason": eligibility.reason,
            },
            status=status.HTTP_200_OK,
        )
