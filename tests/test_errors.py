"""Structured error format and boundary number coercion."""

from decimal import Decimal

import pytest

from finplan.core.errors import (
    FinPlanError,
    InvalidInputError,
    error_response,
    to_decimal,
)
from finplan.services import debt_service


def test_invalid_input_returns_structured_json():
    with pytest.raises(InvalidInputError) as exc_info:
        debt_service.compute_strategy([{"id": 1, "remaining_amount": "abc"}])

    body = error_response(exc_info.value)
    assert body["error"] is True
    assert body["status_code"] == 422
    assert body["detail"] == "Invalid debt at index 0"
    assert body["errors"][0]["loc"] == ["remaining_amount"]


def test_base_error_response():
    body = error_response(FinPlanError("Planner unavailable"))
    assert body == {"error": True, "status_code": 500, "detail": "Planner unavailable"}


def test_unexpected_exception_hides_detail():
    body = error_response(RuntimeError("secret stack detail"))
    assert body["status_code"] == 500
    assert body["detail"] == "Internal server error"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), "NaN", "-Infinity", "ten", None, True])
def test_to_decimal_rejects_non_finite(value):
    with pytest.raises(InvalidInputError):
        to_decimal(value, "amount")


def test_to_decimal_accepts_numbers():
    assert to_decimal(12, "amount") == Decimal("12")
    assert to_decimal("12.50", "amount") == Decimal("12.50")
    assert to_decimal(0.1, "amount") == Decimal("0.1")
    assert to_decimal(-3, "amount") == Decimal("-3")


def test_to_decimal_negative_not_allowed():
    with pytest.raises(InvalidInputError) as exc_info:
        to_decimal(-1, "extra_payment", allow_negative=False)
    assert exc_info.value.detail == "extra_payment must not be negative"
    assert exc_info.value.errors[0]["loc"] == ["extra_payment"]
