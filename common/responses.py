"""Shared error payloads for API views.

Views catch service exceptions and turn them into these responses so every
endpoint reports stock and concurrency failures the same way.
"""

from rest_framework import status
from rest_framework.response import Response


def stock_problem_body(exc) -> dict:
    return {"detail": str(exc), "unavailable_items": list(getattr(exc, "problems", []))}


def stock_problem_response(exc) -> Response:
    """422 listing every line that cannot be supplied."""
    return Response(stock_problem_body(exc), status=status.HTTP_422_UNPROCESSABLE_ENTITY)


def retryable_conflict_body(detail: str = "The request conflicted with a concurrent update. Please retry.") -> dict:
    return {"detail": detail, "retryable": True}


def retryable_conflict_response(detail: str | None = None) -> Response:
    body = retryable_conflict_body(detail) if detail else retryable_conflict_body()
    return Response(body, status=status.HTTP_409_CONFLICT)
