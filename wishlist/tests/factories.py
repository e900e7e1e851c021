import factory
from factory.django import DjangoModelFactory
from wishlist.models import WishlistItem


class WishlistItemFactory(DjangoModelFactory):
    class Meta:
        model = WishlistItem

    user = factory.SubFactory("users.tests.factories.UserFactory")
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
