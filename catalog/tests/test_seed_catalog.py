from io import StringIO

import pytest
from catalog.models import Category, Product
from django.core.management import call_command


@pytest.mark.django_db
def test_seed_catalog_is_idempotent():
    call_command("seed_catalog", stdout=StringIO())
    call_command("seed_catalog", stdout=StringIO())

    assert Category.objects.count() == 3
    assert Product.objects.count() == 3
    assert Category.objects.get(slug="totes").parent.slug == "bags"
    assert Product.objects.get(sku="SKU-TOTE0001").effective_price == Product.objects.get(
        sku="SKU-TOTE0001"
    ).sale_price
