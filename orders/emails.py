"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

from django.conf import settings
from django.core.mail import send_mail


def _order_url(order) -> str:
    frontend = getattr(settings, "FRONTEND_URL", "")
    if not frontend:
        return ""
    return f"{frontend.rstrip('/')}/orders/{order.order_number}"


def send_order_confirmation_email(order) -> None:
    """Send the order confirmation to the customer.

    Lists every line with its frozen price. No-ops when the user has no email.
    """
    to_email = getattr(order.user, "email", None)
    if not to_email:
        return

    lines = [
        f"  {item.product_name} x {item.quantity} @ {item.price} = {item.total}" for item in order.items.all()
    ]
    body = (
        f"Hi {order.user.display_name},\n\n"
        "Thank you for your order!\n\n"
        f"Order: {order.order_number}\n"
        f"Status: {order.status_label}\n\n"
        "Items:\n" + "\n".join(lines) + "\n\n"
        f"Total: {order.total_amount}\n\n"
        "Shipping to:\n"
        f"{order.formatted_shipping_address}\n"
    )
    url = _order_url(order)
    if url:
        body += f"\nYou can view your order here: {url}\n"

    send_mail(
        f"Order confirmation {order.order_number}",
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [to_email],
        fail_silently=False,
    )


def send_order_status_email(order, previous_status: str) -> None:
    """Notify the customer that their order moved to a new status."""
    to_email = getattr(order.user, "email", None)
    if not to_email:
        return

    body = (
        f"Hi {order.user.display_name},\n\n"
        f"Your order {order.order_number} changed from {previous_status} to {order.status}.\n"
    )
    url = _order_url(order)
    if url:
        body += f"\nYou can view your order here: {url}\n"

    send_mail(
        f"Your order {order.order_number} is now {order.status_label.lower()}",
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [to_email],
        fail_silently=False,
    )
