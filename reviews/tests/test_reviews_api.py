import pytest
from catalog.tests.factories import ProductFactory
from reviews.models import Review
from reviews.tests.factories import ReviewFactory, deliver
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_product_reviews_are_public_and_hide_unapproved():
    product = ProductFactory()
    shown = ReviewFactory(product=product, rating=5)
    ReviewFactory(product=product, rating=1, is_approved=False)
    ReviewFactory(rating=3)

    resp = APIClient().get(f"/api/v1/reviews/products/{product.id}/")

    assert resp.status_code == 200
    body = resp.json()
    assert [r["id"] for r in body["results"]] == [shown.id]
    assert body["results"][0]["user_name"] == shown.user.get_full_name()
    assert body["statistics"]["total_reviews"] == 1
    assert body["statistics"]["average_rating"] == 5.0


@pytest.mark.django_db
def test_product_reviews_filter_and_order_by_rating():
    product = ProductFactory()
    low = ReviewFactory(product=product, rating=2)
    high = ReviewFactory(product=product, rating=5)
    also_high = ReviewFactory(product=product, rating=5)

    ordered = APIClient().get(f"/api/v1/reviews/products/{product.id}/", {"ordering": "rating"}).json()
    assert [r["id"] for r in ordered["results"]][0] == low.id

    filtered = APIClient().get(f"/api/v1/reviews/products/{product.id}/", {"rating": 5}).json()
    assert {r["id"] for r in filtered["results"]} == {high.id, also_high.id}
    # Statistics always describe every approved review
    assert filtered["statistics"]["total_reviews"] == 3


@pytest.mark.django_db
def test_product_reviews_reject_bad_query():
    product = ProductFactory()
    resp = APIClient().get(f"/api/v1/reviews/products/{product.id}/", {"rating": 9})
    assert resp.status_code == 400


@pytest.mark.django_db
def test_reviews_of_inactive_or_unknown_product_are_404():
    hidden = ProductFactory(is_active=False)
    assert APIClient().get(f"/api/v1/reviews/products/{hidden.id}/").status_code == 404
    assert APIClient().get("/api/v1/reviews/products/999999/").status_code == 404


@pytest.mark.django_db
def test_create_review_requires_authentication():
    product = ProductFactory()
    resp = APIClient().post(f"/api/v1/reviews/products/{product.id}/", {"rating": 5}, format="json")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_create_review_for_delivered_product():
    user, product = UserFactory(), ProductFactory()
    deliver(user=user, product=product)

    resp = _client(user).post(
        f"/api/v1/reviews/products/{product.id}/",
        {"rating": 4, "title": "Good tote", "comment": "Holds a laptop"},
        format="json",
    )

    assert resp.status_code == 201
    assert resp.json()["rating"] == 4
    assert Review.objects.filter(user=user, product=product).exists()


@pytest.mark.django_db
def test_create_review_without_purchase_is_forbidden():
    product = ProductFactory()
    resp = _client(UserFactory()).post(f"/api/v1/reviews/products/{product.id}/", {"rating": 4}, format="json")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "You can only review products you have received"


@pytest.mark.django_db
def test_duplicate_review_conflicts():
    user, product = UserFactory(), ProductFactory()
    deliver(user=user, product=product)
    client = _client(user)
    assert client.post(f"/api/v1/reviews/products/{product.id}/", {"rating": 4}, format="json").status_code == 201

    resp = client.post(f"/api/v1/reviews/products/{product.id}/", {"rating": 1}, format="json")

    assert resp.status_code == 409
    assert Review.objects.get(user=user, product=product).rating == 4


@pytest.mark.django_db
@pytest.mark.parametrize("rating", [0, 6, "five"])
def test_create_review_validates_rating(rating):
    user, product = UserFactory(), ProductFactory()
    deliver(user=user, product=product)
    resp = _client(user).post(f"/api/v1/reviews/products/{product.id}/", {"rating": rating}, format="json")
    assert resp.status_code == 400
    assert "rating" in resp.json()


@pytest.mark.django_db
def test_owner_updates_and_deletes_review():
    review = ReviewFactory(rating=3, title="Fine")
    client = _client(review.user)

    resp = client.patch(f"/api/v1/reviews/{review.id}/", {"rating": 5, "comment": None}, format="json")
    assert resp.status_code == 200
    assert resp.json()["rating"] == 5
    assert resp.json()["title"] == "Fine"
    assert resp.json()["comment"] == ""

    assert client.delete(f"/api/v1/reviews/{review.id}/").status_code == 204
    assert not Review.objects.filter(id=review.id).exists()


@pytest.mark.django_db
def test_other_users_review_is_404():
    review = ReviewFactory(rating=3)
    client = _client(UserFactory())

    assert client.patch(f"/api/v1/reviews/{review.id}/", {"rating": 1}, format="json").status_code == 404
    assert client.delete(f"/api/v1/reviews/{review.id}/").status_code == 404
    review.refresh_from_db()
    assert review.rating == 3


@pytest.mark.django_db
def test_my_reviews_include_unapproved_with_product():
    user = UserFactory()
    mine = ReviewFactory(user=user, is_approved=False)
    ReviewFactory()

    resp = _client(user).get("/api/v1/reviews/mine/")

    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["id"] for r in results] == [mine.id]
    assert results[0]["product"]["id"] == mine.product_id
    assert results[0]["is_approved"] is False


@pytest.mark.django_db
def test_can_review_endpoint():
    user, product = UserFactory(), ProductFactory()
    client = _client(user)
    url = f"/api/v1/reviews/products/{product.id}/can-review/"

    assert client.get(url).json() == {
        "can_review": False,
        "has_reviewed": False,
        "has_purchased": False,
        "reason": "You can only review products you have received",
    }

    deliver(user=user, product=product)
    assert client.get(url).json()["can_review"] is True
    assert APIClient().get(url).status_code == 401
