import factory
from catalog.models import Category, Product
from factory import Faker
from factory.django import DjangoModelFactory


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    description = Faker("sentence")
    is_active = True
    sort_order = 0


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Product {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    sku = factory.Sequence(lambda n: f"SKU-{n:06d}")
    description = Faker("paragraph")
    category = factory.SubFactory(CategoryFactory)
    price = factory.Faker("pydecimal", left_digits=3, right_digits=2, positive=True, min_value=1)
    sale_price = None
    stock_quantity = 10
    is_active = True
