from decimal import Decimal

import pytest
from catalog.models import Category, Product
from catalog.tests.factories import CategoryFactory, ProductFactory
from orders.tests.factories import OrderItemFactory
from rest_framework.test import APIClient
from users.tests.factories import AdminUserFactory, UserFactory


@pytest.fixture
def admin_client():
    client = APIClient()
    client.force_authenticate(user=AdminUserFactory())
    return client


@pytest.mark.django_db
def test_catalog_admin_requires_staff():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    assert client.post("/api/v1/admin/catalog/categories/", {"name": "X"}, format="json").status_code == 403


@pytest.mark.django_db
def test_create_category_and_product(admin_client):
    r_cat = admin_client.post("/api/v1/admin/catalog/categories/", {"name": "Bags"}, format="json")
    assert r_cat.status_code == 201
    assert r_cat.json()["slug"] == "bags"

    r_prod = admin_client.post(
        "/api/v1/admin/catalog/products/",
        {
            "name": "Canvas Tote",
            "category": r_cat.json()["id"],
            "price": "30.00",
            "sale_price": "24.99",
            "stock_quantity": 7,
        },
        format="json",
    )
    assert r_prod.status_code == 201
    body = r_prod.json()
    assert body["effective_price"] == "24.99"
    assert body["sku"].startswith("SKU-")
    assert Product.objects.get(id=body["id"]).stock_quantity == 7


@pytest.mark.django_db
def test_product_update_ignores_stock_quantity(admin_client):
    product = ProductFactory(stock_quantity=3)

    resp = admin_client.patch(
        f"/api/v1/admin/catalog/products/{product.id}/",
        {"price": "12.00", "stock_quantity": 999},
        format="json",
    )

    assert resp.status_code == 200
    product.refresh_from_db()
    assert product.price == Decimal("12.00")
    assert product.stock_quantity == 3


@pytest.mark.django_db
def test_negative_price_rejected(admin_client):
    resp = admin_client.post(
        "/api/v1/admin/catalog/products/", {"name": "Bad", "price": "-1.00"}, format="json"
    )
    assert resp.status_code == 400
    assert "price" in resp.json()


@pytest.mark.django_db
def test_category_cycle_rejected(admin_client):
    parent = CategoryFactory()
    child = CategoryFactory(parent=parent)

    resp = admin_client.patch(
        f"/api/v1/admin/catalog/categories/{parent.id}/", {"parent": child.id}, format="json"
    )

    assert resp.status_code == 400
    assert "parent" in resp.json()
    parent.refresh_from_db()
    assert parent.parent_id is None


@pytest.mark.django_db
def test_category_delete_orphans_children(admin_client):
    parent = CategoryFactory()
    child = CategoryFactory(parent=parent)

    assert admin_client.delete(f"/api/v1/admin/catalog/categories/{parent.id}/").status_code == 204

    child.refresh_from_db()
    assert child.parent_id is None
    assert not Category.objects.filter(id=parent.id).exists()


@pytest.mark.django_db
def test_product_delete_endpoint_outcomes(admin_client):
    fresh = ProductFactory()
    ordered = OrderItemFactory().product

    r1 = admin_client.delete(f"/api/v1/admin/catalog/products/{fresh.id}/")
    r2 = admin_client.delete(f"/api/v1/admin/catalog/products/{ordered.id}/")

    assert r1.json() == {"action": "deleted"}
    assert r2.json() == {"action": "deactivated"}
    assert not Product.objects.filter(id=fresh.id).exists()
    assert Product.objects.filter(id=ordered.id, is_active=False).exists()
