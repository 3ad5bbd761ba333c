from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from flask import request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .datetime_utils import parse_iso_date

ACTOR_ID_HEADER = "X-Actor-Id"
ACTOR_ROLE_HEADER = "X-Actor-Role"


def to_jsonable(value: Any) -> Any:
    """Dataclasses/enums/dates/Decimals to plain JSON types (money stays exact as a string)."""
    if is_dataclass(value) and not isinstance(value, type):
        return {k: to_jsonable(v) for k, v in asdict(value).items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def actor() -> tuple[str, Role]:
    """Caller identity from request headers; verification happens upstream."""
    actor_id = (request.headers.get(ACTOR_ID_HEADER) or "").strip()
    role_raw = (request.headers.get(ACTOR_ROLE_HEADER) or "").strip().upper()
    if not actor_id or not role_raw:
        raise AuthorizationError("Missing actor headers")
    try:
        return actor_id, Role(role_raw)
    except ValueError:
        raise AuthorizationError(f"Unknown role: {role_raw}")


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_date(name: str) -> Optional[date]:
    v = (request.args.get(name) or "").strip()
    return parse_iso_date(v) if v else None


def query_str(name: str) -> Optional[str]:
    v = (request.args.get(name) or "").strip()
    return v or None
