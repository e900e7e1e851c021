from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone
from orders.models import IdempotencyKey
from orders.services import compute_request_hash, with_idempotency
from users.tests.factories import UserFactory


def _run(user, handler, request_hash="h1", key="k1"):
    return with_idempotency(
        key=key,
        user=user,
        path="/api/v1/orders/",
        method="post",
        request_hash=request_hash,
        handler=handler,
    )


@pytest.mark.django_db
def test_replay_returns_stored_response_without_running_handler():
    user = UserFactory()
    calls = []

    def handler():
        calls.append(1)
        return {"order_number": "ORD-2026-000001"}, 201

    first = _run(user, handler)
    second = _run(user, handler)

    assert first == second == ({"order_number": "ORD-2026-000001"}, 201)
    assert len(calls) == 1
    record = IdempotencyKey.objects.get()
    assert record.scope == f"user:{user.id}"
    assert record.method == "POST"
    assert record.expires_at > timezone.now() + timedelta(hours=23)


@pytest.mark.django_db
def test_reuse_with_different_payload_conflicts():
    user = UserFactory()
    _run(user, lambda: ({"ok": True}, 200), request_hash="a")

    body, code = _run(user, lambda: ({"ok": True}, 200), request_hash="b")

    assert code == 409
    assert "different request payload" in body["detail"]


@pytest.mark.django_db
def test_keys_are_scoped_per_user():
    first, second = UserFactory(), UserFactory()
    _run(first, lambda: ({"who": "first"}, 201))

    body, _ = _run(second, lambda: ({"who": "second"}, 201))

    assert body == {"who": "second"}
    assert IdempotencyKey.objects.count() == 2


@pytest.mark.django_db
def test_in_progress_record_conflicts():
    user = UserFactory()
    IdempotencyKey.objects.create(
        key="k1", user=user, scope=f"user:{user.id}", path="/api/v1/orders/", method="POST", request_hash="h1"
    )

    body, code = _run(user, lambda: ({"ok": True}, 200))

    assert code == 409
    assert body["detail"] == "Request in progress"


@pytest.mark.django_db
def test_retryable_outcomes_are_not_stored():
    user = UserFactory()
    _run(user, lambda: ({"detail": "conflict", "retryable": True}, 409))
    assert not IdempotencyKey.objects.exists()

    body, code = _run(user, lambda: ({"ok": True}, 201))
    assert (body, code) == ({"ok": True}, 201)


@pytest.mark.django_db
def test_stock_problem_outcomes_are_not_stored():
    user = UserFactory()
    shortfall = {
        "detail": "Insufficient stock",
        "unavailable_items": [{"product_id": 1, "reason": "insufficient_stock"}],
    }

    body, code = _run(user, lambda: (shortfall, 422))
    assert code == 422
    assert not IdempotencyKey.objects.exists()

    # Once the cart is fixed the same key runs the handler again
    body, code = _run(user, lambda: ({"ok": True}, 201))
    assert (body, code) == ({"ok": True}, 201)


@pytest.mark.django_db
def test_handler_exception_frees_the_key():
    user = UserFactory()

    def boom():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        _run(user, boom)
    assert not IdempotencyKey.objects.exists()


def test_compute_request_hash_is_order_independent():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({}) is None
    assert compute_request_hash(None) is None


@pytest.mark.django_db
def test_cleanup_idempotency_command():
    user = UserFactory()
    now = timezone.now()
    IdempotencyKey.objects.create(
        key="old", user=user, scope="s", path="/p", method="POST", expires_at=now - timedelta(hours=1)
    )
    IdempotencyKey.objects.create(
        key="new", user=user, scope="s", path="/p", method="POST", expires_at=now + timedelta(hours=1)
    )

    out = StringIO()
    call_command("cleanup_idempotency", "--dry-run", stdout=out)
    assert "1 expired" in out.getvalue()
    assert IdempotencyKey.objects.count() == 2

    call_command("cleanup_idempotency", stdout=StringIO())
    assert list(IdempotencyKey.objects.values_list("key", flat=True)) == ["new"]
