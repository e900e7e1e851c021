"""Review serializers."""

from catalog.serializers import ProductSummarySerializer
from rest_framework import serializers

from .models import MAX_RATING, MIN_RATING, Review


class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(read_only=True)

    class Meta:
        model = Review
        fields = ["id", "product", "user_name", "rating", "title", "comment", "created_at", "updated_at"]
        read_only_fields = fields


class MyReviewSerializer(ReviewSerializer):
    product = ProductSummarySerializer(read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ["is_approved"]
        read_only_fields = fields


class ReviewWriteSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING)
    title = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)


class ReviewListQuerySerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING, required=False)
    ordering = serializers.ChoiceField(
        choices=["created_at", "-created_at", "rating", "-rating"],
        required=False,
        default="-created_at",
    )
