import pytest
from catalog.tests.factories import ProductFactory
from django.db import IntegrityError, transaction
from orders.models import Order
from reviews.models import Review
from reviews.selectors import review_eligibility, review_statistics
from reviews.services import (
    AlreadyReviewed,
    PurchaseRequired,
    ReviewNotFound,
    create_review,
    delete_review,
    update_review,
)
from reviews.tests.factories import ReviewFactory, deliver
from users.tests.factories import UserFactory


@pytest.mark.django_db
def test_create_review_after_delivery():
    user, product = UserFactory(), ProductFactory()
    deliver(user=user, product=product)

    review = create_review(user=user, product_id=product.id, rating=5, title="Sturdy", comment=None)

    assert review.rating == 5
    assert review.comment == ""
    assert review.is_approved is True


@pytest.mark.django_db
@pytest.mark.parametrize("status", [Order.STATUS_PENDING, Order.STATUS_SHIPPED, Order.STATUS_CANCELLED])
def test_create_review_requires_a_delivered_order(status):
    user, product = UserFactory(), ProductFactory()
    deliver(user=user, product=product, status=status)

    with pytest.raises(PurchaseRequired):
        create_review(user=user, product_id=product.id, rating=3)
    assert not Review.objects.exists()


@pytest.mark.django_db
def test_other_users_purchase_does_not_count():
    product = ProductFactory()
    deliver(user=UserFactory(), product=product)

    with pytest.raises(PurchaseRequired):
        create_review(user=UserFactory(), product_id=product.id, rating=3)


@pytest.mark.django_db
def test_second_review_of_same_product_is_rejected():
    user, product = UserFactory(), ProductFactory()
    deliver(user=user, product=product)
    create_review(user=user, product_id=product.id, rating=4)

    with pytest.raises(AlreadyReviewed):
        create_review(user=user, product_id=product.id, rating=2)
    assert Review.objects.filter(user=user, product=product).count() == 1


@pytest.mark.django_db
@pytest.mark.parametrize("rating", [0, 6])
def test_rating_outside_range_is_rejected_by_the_database(rating):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            ReviewFactory(rating=rating)


@pytest.mark.django_db
def test_eligibility_reports_reason():
    user, product = UserFactory(), ProductFactory()

    eligibility = review_eligibility(user=user, product_id=product.id)
    assert (eligibility.can_review, eligibility.has_purchased) == (False, False)
    assert eligibility.reason == "You can only review products you have received"

    deliver(user=user, product=product)
    assert review_eligibility(user=user, product_id=product.id).can_review is True

    ReviewFactory(user=user, product=product)
    eligibility = review_eligibility(user=user, product_id=product.id)
    assert eligibility.can_review is False
    assert eligibility.reason == "You have already reviewed this product"


@pytest.mark.django_db
def test_update_review_only_touches_given_fields():
    review = ReviewFactory(rating=2, title="Meh")

    updated = update_review(user=review.user, review_id=review.id, rating=5)

    assert (updated.rating, updated.title) == (5, "Meh")
    review.refresh_from_db()
    assert review.rating == 5


@pytest.mark.django_db
def test_only_the_owner_can_update_or_delete():
    review = ReviewFactory()
    stranger = UserFactory()

    with pytest.raises(ReviewNotFound):
        update_review(user=stranger, review_id=review.id, rating=1)
    with pytest.raises(ReviewNotFound):
        delete_review(user=stranger, review_id=review.id)

    delete_review(user=review.user, review_id=review.id)
    assert not Review.objects.filter(id=review.id).exists()


@pytest.mark.django_db
def test_review_statistics_cover_approved_reviews_only():
    product = ProductFactory()
    for rating in (5, 5, 4, 2):
        ReviewFactory(product=product, rating=rating)
    ReviewFactory(product=product, rating=1, is_approved=False)

    stats = review_statistics(product_id=product.id)

    assert stats["total_reviews"] == 4
    assert stats["average_rating"] == 4.0
    breakdown = {row["rating"]: row for row in stats["rating_breakdown"]}
    assert breakdown[5]["count"] == 2
    assert breakdown[5]["percentage"] == 50
    assert breakdown[2]["count"] == 1
    assert breakdown[1]["count"] == 0
    assert breakdown[3] == {"rating": 3, "count": 0, "percentage": 0}


@pytest.mark.django_db
def test_review_statistics_without_reviews():
    stats = review_statistics(product_id=ProductFactory().id)
    assert stats["average_rating"] is None
    assert stats["total_reviews"] == 0
    assert [row["rating"] for row in stats["rating_breakdown"]] == [5, 4, 3, 2, 1]
