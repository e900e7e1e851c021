from decimal import Decimal

import pytest
from cart.models import CartItem
from cart.tests.factories import CartItemFactory
from catalog.tests.factories import ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_cart_requires_authentication():
    resp = APIClient().get("/api/v1/cart/")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_cart_detail_initial_empty():
    resp = _client(UserFactory()).get("/api/v1/cart/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["totals"]["subtotal"] == "0.00"
    assert body["totals"]["total"] == "0.00"
    assert body["unavailable_items_removed"] == 0


@pytest.mark.django_db
def test_add_item_endpoint_creates_item():
    user = UserFactory()
    product = ProductFactory(price=Decimal("12.50"), stock_quantity=5)
    client = _client(user)

    resp = client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 2}, format="json")
    assert resp.status_code == 201
    item_id = resp.json()["id"]

    detail = client.get("/api/v1/cart/").json()
    assert [i["id"] for i in detail["items"]] == [item_id]
    assert detail["items"][0]["unit_price"] == "12.50"
    assert detail["items"][0]["line_total"] == "25.00"
    assert detail["totals"]["subtotal"] == "25.00"
    assert detail["totals"]["item_count"] == 2


@pytest.mark.django_db
def test_add_item_over_stock_returns_422_with_details():
    product = ProductFactory(stock_quantity=1)
    resp = _client(UserFactory()).post(
        "/api/v1/cart/items/", {"product_id": product.id, "quantity": 3}, format="json"
    )
    assert resp.status_code == 422
    body = resp.json()
    assert body["unavailable_items"][0]["product_id"] == product.id
    assert body["unavailable_items"][0]["reason"] == "insufficient_stock"
    assert body["unavailable_items"][0]["available_quantity"] == 1


@pytest.mark.django_db
def test_add_item_unknown_product_returns_404():
    resp = _client(UserFactory()).post("/api/v1/cart/items/", {"product_id": 424242, "quantity": 1}, format="json")
    assert resp.status_code == 404


@pytest.mark.django_db
@pytest.mark.parametrize("quantity", [0, -1, 101])
def test_add_item_validates_quantity_range(quantity):
    product = ProductFactory()
    resp = _client(UserFactory()).post(
        "/api/v1/cart/items/", {"product_id": product.id, "quantity": quantity}, format="json"
    )
    assert resp.status_code == 400
    assert "quantity" in resp.json()


@pytest.mark.django_db
def test_get_cart_reports_removed_lines():
    user = UserFactory()
    CartItemFactory(user=user, product=ProductFactory(stock_quantity=3), quantity=1)
    CartItemFactory(user=user, product=ProductFactory(is_active=False), quantity=1)

    body = _client(user).get("/api/v1/cart/").json()

    assert len(body["items"]) == 1
    assert body["unavailable_items_removed"] == 1
    assert CartItem.objects.filter(user=user).count() == 1


@pytest.mark.django_db
def test_summary_endpoint():
    user = UserFactory()
    CartItemFactory(user=user, product=ProductFactory(price=Decimal("4.00")), quantity=3)

    resp = _client(user).get("/api/v1/cart/summary/")

    assert resp.status_code == 200
    assert resp.json()["totals"]["total"] == "12.00"


@pytest.mark.django_db
def test_update_item_quantity_endpoint():
    user = UserFactory()
    item = CartItemFactory(user=user, product=ProductFactory(stock_quantity=10), quantity=2)

    resp = _client(user).patch(f"/api/v1/cart/items/{item.id}/", {"quantity": 3}, format="json")

    assert resp.status_code == 200
    assert resp.json()["id"] == item.id
    assert resp.json()["quantity"] == 3


@pytest.mark.django_db
def test_update_inactive_line_returns_422_and_removes_it():
    user = UserFactory()
    item = CartItemFactory(user=user, product=ProductFactory(is_active=False), quantity=1)

    resp = _client(user).patch(f"/api/v1/cart/items/{item.id}/", {"quantity": 2}, format="json")

    assert resp.status_code == 422
    assert resp.json()["unavailable_items"][0]["reason"] == "unavailable"
    assert not CartItem.objects.filter(id=item.id).exists()


@pytest.mark.django_db
def test_other_users_item_is_not_found():
    item = CartItemFactory()
    client = _client(UserFactory())

    assert client.patch(f"/api/v1/cart/items/{item.id}/", {"quantity": 2}, format="json").status_code == 404
    assert client.delete(f"/api/v1/cart/items/{item.id}/").status_code == 404
    assert CartItem.objects.filter(id=item.id).exists()


@pytest.mark.django_db
def test_delete_item_endpoint():
    user = UserFactory()
    item = CartItemFactory(user=user)

    resp = _client(user).delete(f"/api/v1/cart/items/{item.id}/")

    assert resp.status_code == 204
    assert not CartItem.objects.filter(id=item.id).exists()


@pytest.mark.django_db
def test_clear_endpoint():
    user = UserFactory()
    CartItemFactory(user=user)
    CartItemFactory(user=user)

    resp = _client(user).post("/api/v1/cart/clear/")

    assert resp.status_code == 200
    assert resp.json() == {"status": "cleared", "removed_count": 2}


@pytest.mark.django_db
def test_validate_endpoint_valid_cart():
    user = UserFactory()
    CartItemFactory(user=user, product=ProductFactory(stock_quantity=5), quantity=2)

    resp = _client(user).post("/api/v1/cart/validate/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["valid"] is True
    assert body["invalid_items"] == []
    assert len(body["valid_items"]) == 1


@pytest.mark.django_db
def test_validate_endpoint_reports_invalid_lines():
    user = UserFactory()
    short = CartItemFactory(user=user, product=ProductFactory(stock_quantity=1), quantity=4)

    resp = _client(user).post("/api/v1/cart/validate/")

    assert resp.status_code == 422
    body = resp.json()
    assert body["valid"] is False
    assert body["detail"] == "Cart has validation errors"
    assert body["invalid_items"][0]["cart_item_id"] == short.id
    # Understocked lines stay for the user to fix
    assert CartItem.objects.filter(id=short.id).exists()


@pytest.mark.django_db
def test_validate_endpoint_empty_cart():
    resp = _client(UserFactory()).post("/api/v1/cart/validate/")
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Cart is empty"
