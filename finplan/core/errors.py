"""Structured errors: boundary validation failures in a consistent JSON format."""

import math
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ValidationError


class FinPlanError(Exception):
    """Base class for errors raised by the planning core."""

    status_code = 500
    detail = "Internal error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        if detail is not None:
            self.detail = detail


class InvalidInputError(FinPlanError):
    """Input rejected at the boundary, before any simulation runs."""

    status_code = 422
    detail = "Validation error"

    def __init__(self, detail: str | None = None, errors: list[dict] | None = None):
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def from_validation_error(cls, exc: ValidationError, what: str) -> "InvalidInputError":
        errors = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        return cls(f"Invalid {what}", errors)


def error_response(exc: Exception) -> dict:
    """Build the JSON error body a caller can return for any exception."""
    if isinstance(exc, InvalidInputError):
        return {
            "error": True,
            "status_code": exc.status_code,
            "detail": exc.detail,
            "errors": exc.errors,
        }
    if isinstance(exc, FinPlanError):
        return {
            "error": True,
            "status_code": exc.status_code,
            "detail": exc.detail,
        }
    return {
        "error": True,
        "status_code": 500,
        "detail": "Internal server error",
    }


def validate_records(model: type[BaseModel], records, what: str) -> list:
    """Validate a list of records (model instances or dicts) into `model`."""
    validated = []
    for index, record in enumerate(records or []):
        if isinstance(record, model):
            validated.append(record)
            continue
        try:
            validated.append(model.model_validate(record))
        except ValidationError as exc:
            raise InvalidInputError.from_validation_error(exc, f"{what} at index {index}") from exc
    return validated


def _field_error(name: str, msg: str, error_type: str) -> InvalidInputError:
    return InvalidInputError(
        f"{name} {msg}",
        [{"loc": [name], "msg": msg, "type": error_type}],
    )


def to_decimal(value, name: str, *, allow_negative: bool = True) -> Decimal:
    """Coerce a plain numeric argument to a finite Decimal or raise.

    NaN would silently corrupt every month of a simulation, so it is
    rejected here rather than inside the engines.
    """
    if isinstance(value, bool) or value is None:
        raise _field_error(name, "must be a number", "decimal_type")
    if isinstance(value, float) and not math.isfinite(value):
        raise _field_error(name, "must be a finite number", "finite_number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise _field_error(name, "must be a number", "decimal_parsing") from exc
    if not result.is_finite():
        raise _field_error(name, "must be a finite number", "finite_number")
    if not allow_negative and result < 0:
        raise _field_error(name, "must not be negative", "greater_than_equal")
    return result
