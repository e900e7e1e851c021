from cart.models import CartItem
from cart.services import reconcile_cart
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from wishlist.models import WishlistItem
from wishlist.services import reconcile_wishlist


class Command(BaseCommand):
    help = "Remove cart and wishlist lines whose product is inactive or out of stock"

    def add_arguments(self, parser):
        parser.add_argument("--skip-wishlists", action="store_true", help="Only sweep carts")

    def handle(self, *args, **options):
        User = get_user_model()
        cart_owners = User.objects.filter(id__in=CartItem.objects.values("user_id"))
        cart_removed = 0
        for user in cart_owners.iterator():
            cart_removed += reconcile_cart(user=user).removed_count

        wishlist_removed = 0
        if not options["skip_wishlists"]:
            wishlist_owners = User.objects.filter(id__in=WishlistItem.objects.values("user_id"))
            for user in wishlist_owners.iterator():
                wishlist_removed += reconcile_wishlist(user=user).removed_count

        self.stdout.write(
            self.style.SUCCESS(
                f"Removed {cart_removed} cart line(s) and {wishlist_removed} wishlist entr(ies)."
            )
        )
