from decimal import Decimal

import pytest
from catalog.tests.factories import CategoryFactory, ProductFactory
from django.test import override_settings
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_product_list_hides_inactive_products():
    visible = ProductFactory()
    ProductFactory(is_active=False)

    resp = APIClient().get("/api/v1/catalog/products/")

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()["results"]] == [visible.id]


@pytest.mark.django_db
def test_product_list_filters():
    shoes = CategoryFactory(slug="shoes")
    cheap = ProductFactory(category=shoes, price=Decimal("10.00"), stock_quantity=0)
    pricey = ProductFactory(category=shoes, price=Decimal("90.00"), featured=True)
    ProductFactory(price=Decimal("50.00"))
    client = APIClient()

    def ids(query):
        return {p["id"] for p in client.get(f"/api/v1/catalog/products/?{query}").json()["results"]}

    assert ids("category=shoes") == {cheap.id, pricey.id}
    assert ids("category=shoes&in_stock=true") == {pricey.id}
    assert ids("featured=true") == {pricey.id}
    assert ids("min_price=20&max_price=95&category=shoes") == {pricey.id}


@pytest.mark.django_db
def test_product_detail_by_slug():
    product = ProductFactory(price=Decimal("40.00"), sale_price=Decimal("30.00"))

    resp = APIClient().get(f"/api/v1/catalog/products/{product.slug}/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["effective_price"] == "30.00"
    assert body["discount_percentage"] == 25
    assert body["is_on_sale"] is True
    assert body["category"]["id"] == product.category_id


@pytest.mark.django_db
def test_inactive_product_detail_is_404():
    product = ProductFactory(is_active=False)
    assert APIClient().get(f"/api/v1/catalog/products/{product.slug}/").status_code == 404


@pytest.mark.django_db
def test_categories_and_category_products():
    category = CategoryFactory()
    hidden = CategoryFactory(is_active=False)
    in_category = ProductFactory(category=category)
    ProductFactory()
    client = APIClient()

    cats = {c["id"] for c in client.get("/api/v1/catalog/categories/").json()["results"]}
    assert category.id in cats
    assert hidden.id not in cats

    resp = client.get(f"/api/v1/catalog/categories/{category.slug}/products/")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()["results"]] == [in_category.id]


@pytest.mark.django_db
@override_settings(
    REST_FRAMEWORK={
        "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
        "DEFAULT_AUTHENTICATION_CLASSES": [
            "rest_framework_simplejwt.authentication.JWTAuthentication",
        ],
        "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
        "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
        "PAGE_SIZE": 20,
        "DEFAULT_THROTTLE_RATES": {
            "user": "100/min",
            "anon": "100/min",
            "catalog": "1/min",
        },
    }
)
def test_catalog_scope_throttling_hits_limit_quickly():
    client = APIClient()
    assert client.get("/api/v1/catalog/products/").status_code == 200
    assert client.get("/api/v1/catalog/products/").status_code == 429
