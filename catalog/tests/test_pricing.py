from decimal import Decimal

import pytest
from catalog.models import Product
from catalog.tests.factories import ProductFactory


@pytest.mark.parametrize(
    "price,sale_price,expected,on_sale,discount",
    [
        ("100.00", None, "100.00", False, None),
        ("100.00", "75.00", "75.00", True, 25),
        ("100.00", "100.00", "100.00", False, None),
        ("100.00", "120.00", "100.00", False, None),
        ("30.00", "19.99", "19.99", True, 33),
    ],
)
def test_effective_price_and_discount(price, sale_price, expected, on_sale, discount):
    product = Product(price=Decimal(price), sale_price=Decimal(sale_price) if sale_price else None)
    assert product.effective_price == Decimal(expected)
    assert product.is_on_sale is on_sale
    assert product.discount_percentage == discount


@pytest.mark.parametrize(
    "is_active,stock,quantity,expected",
    [
        (True, 5, 5, True),
        (True, 5, 6, False),
        (True, 0, 1, False),
        (False, 10, 1, False),
    ],
)
def test_is_available(is_active, stock, quantity, expected):
    assert Product(is_active=is_active, stock_quantity=stock).is_available(quantity) is expected


@pytest.mark.django_db
def test_slug_and_sku_are_generated():
    product = Product.objects.create(name="Canvas Tote", price=Decimal("24.99"))
    assert product.slug == "canvas-tote"
    assert product.sku.startswith("SKU-")
    assert len(product.sku) == 12


@pytest.mark.django_db
def test_in_stock_flag():
    assert ProductFactory(stock_quantity=1).is_in_stock is True
    assert ProductFactory(stock_quantity=0).is_in_stock is False
