"""
ENTITY SPECS

Per-entity configuration for the generic Resource Synchronizer:
endpoint, model, immutable fields, form validation and messages.

Validation mirrors the console forms:
- Driver: name required, shift hours >= 0, past 7 day hours comma separated
- Route:  routeId required, distance > 0, traffic Low/Medium/High, base time >= 1
- Order:  orderId required, value > 0, route required, status Pending/Delivered
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Type

from opsconsole.core.models import (
    ALL_ORDER_STATUSES,
    ALL_TRAFFIC_LEVELS,
    ORDER_PENDING,
    Driver,
    Order,
    Route,
    WireModel,
)


class ValidationError(ValueError):
    """Raised when a form value fails client-side validation."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name


# ==================================================
# FIELD COERCERS
# ==================================================

def _required_text(message: str) -> Callable[[str, Any], str]:
    def check(name: str, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            raise ValidationError(name, message)
        return text
    return check


def _optional_text(name: str, value: Any):
    text = "" if value is None else str(value).strip()
    return text or None


def _number(message: str, minimum: float, inclusive: bool = True,
            cast: Callable[[Any], Any] = float) -> Callable[[str, Any], Any]:
    def check(name: str, value: Any):
        try:
            number = cast(float(value))
        except (TypeError, ValueError):
            raise ValidationError(name, message)
        if number < minimum or (not inclusive and number == minimum):
            raise ValidationError(name, message)
        return number
    return check


def _choice(choices, message: str) -> Callable[[str, Any], str]:
    def check(name: str, value: Any) -> str:
        if value not in choices:
            raise ValidationError(name, message)
        return value
    return check


def _flag(name: str, value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def parse_hours_list(name: str, value: Any) -> list:
    """Accept a list of numbers or a comma separated string like '7,8,6'."""
    if value is None or value == "":
        return []
    parts = value.split(",") if isinstance(value, str) else list(value)
    hours = []
    for part in parts:
        if isinstance(part, str):
            part = part.strip()
            if not part:
                continue
        try:
            number = float(part)
        except (TypeError, ValueError):
            raise ValidationError(name, "Hours must be numbers separated by commas")
        if number < 0:
            raise ValidationError(name, "Hours cannot be negative")
        hours.append(number)
    return hours


# ==================================================
# ENTITY SPEC
# ==================================================

@dataclass(frozen=True)
class EntitySpec:
    name: str
    plural: str
    endpoint: str
    model: Type[WireModel]
    validators: Dict[str, Callable[[str, Any], Any]]
    required: FrozenSet[str] = frozenset()
    immutable_fields: FrozenSet[str] = frozenset()
    defaults: Dict[str, Any] = field(default_factory=dict)

    @property
    def load_error(self) -> str:
        return f"Failed to load {self.plural}"

    @property
    def save_error(self) -> str:
        return f"Failed to save {self.name}"

    @property
    def delete_error(self) -> str:
        return f"Failed to delete {self.name}"

    @property
    def confirm_prompt(self) -> str:
        return f"Are you sure you want to delete this {self.name}?"

    def validate_draft(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Validate a complete form; returns coerced attribute values."""
        merged = {**self.defaults, **values}
        for attr in self.required:
            if attr not in merged:
                merged[attr] = None
        return self._coerce(merged)

    def validate_patch(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Validate only the fields present in a patch."""
        return self._coerce(values)

    def _coerce(self, values: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = {}
        for attr, value in values.items():
            check = self.validators.get(attr)
            if check is None:
                continue
            cleaned[attr] = check(attr, value)
        return cleaned

    def build(self, values: Dict[str, Any]) -> WireModel:
        return self.model(**self.validate_draft(values))


DRIVER_SPEC = EntitySpec(
    name="driver",
    plural="drivers",
    endpoint="drivers",
    model=Driver,
    validators={
        "name": _required_text("Name is required"),
        "email": _optional_text,
        "current_shift_hours": _number("Cannot be negative", 0),
        "is_active": _flag,
        "past_7_day_hours": parse_hours_list,
    },
    required=frozenset({"name"}),
    defaults={"current_shift_hours": 0, "is_active": True, "past_7_day_hours": []},
)

ROUTE_SPEC = EntitySpec(
    name="route",
    plural="routes",
    endpoint="routes",
    model=Route,
    validators={
        "route_id": _required_text("Route ID is required"),
        "distance_km": _number("Distance must be positive", 0, inclusive=False),
        "traffic_level": _choice(ALL_TRAFFIC_LEVELS, "Traffic level is required"),
        "base_time_minutes": _number("Base time must be positive", 1, cast=int),
    },
    required=frozenset({"route_id", "distance_km", "traffic_level", "base_time_minutes"}),
    immutable_fields=frozenset({"route_id"}),
)

ORDER_SPEC = EntitySpec(
    name="order",
    plural="orders",
    endpoint="orders",
    model=Order,
    validators={
        "order_id": _required_text("Order ID is required"),
        "value_rs": _number("Value must be positive", 0, inclusive=False),
        "assigned_route_id": _required_text("Route is required"),
        "status": _choice(ALL_ORDER_STATUSES, "Status must be Pending or Delivered"),
    },
    required=frozenset({"order_id", "value_rs", "assigned_route_id"}),
    immutable_fields=frozenset({"order_id"}),
    defaults={"status": ORDER_PENDING},
)
