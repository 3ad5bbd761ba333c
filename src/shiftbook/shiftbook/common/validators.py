from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_money(value: object, field_name: str) -> Decimal:
    """Coerce to Decimal and reject negatives."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field_name} must be zero or greater")
    return amount


def optional_money(value: object, field_name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return require_money(value, field_name)


def require_manager(role: Role) -> None:
    if not Role(role).can_manage:
        raise AuthorizationError("Only owners and managers can do this")
