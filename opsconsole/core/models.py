"""
CONSOLE DATA MODEL

Entities mirrored from the logistics API, plus the immutable
simulation result payload.

Wire format is camelCase JSON; attributes are snake_case.
Server ids may arrive as "id" or "_id".
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple

# ==================================================
# ENUM-LIKE CONSTANTS
# ==================================================

TRAFFIC_LOW: Literal["Low"] = "Low"
TRAFFIC_MEDIUM: Literal["Medium"] = "Medium"
TRAFFIC_HIGH: Literal["High"] = "High"

ALL_TRAFFIC_LEVELS: list[str] = [TRAFFIC_LOW, TRAFFIC_MEDIUM, TRAFFIC_HIGH]

ORDER_PENDING: Literal["Pending"] = "Pending"
ORDER_DELIVERED: Literal["Delivered"] = "Delivered"

ALL_ORDER_STATUSES: list[str] = [ORDER_PENDING, ORDER_DELIVERED]


def _server_id(data: Dict[str, Any]) -> Optional[str]:
    value = data.get("id", data.get("_id"))
    return None if value is None else str(value)


class WireModel:
    """
    Mixin mapping snake_case attributes to the API's camelCase keys.

    Subclasses declare WIRE_FIELDS as {attribute: wire_key}; "id" is
    handled separately because it is server-assigned.
    """

    WIRE_FIELDS: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_api(cls, data: Dict[str, Any]):
        kwargs = {}
        for attr, key in cls.WIRE_FIELDS.items():
            if key in data:
                kwargs[attr] = data[key]
        return cls(id=_server_id(data), **kwargs)

    def to_api(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in self.WIRE_FIELDS.items()}

    @classmethod
    def wire_patch(cls, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Translate an attribute patch into its wire form."""
        return {cls.WIRE_FIELDS[k]: v for k, v in patch.items() if k in cls.WIRE_FIELDS}


@dataclass
class UserProfile(WireModel):
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        "email": "email",
        "name": "name",
        "role": "role",
    }

    email: str = ""
    name: Optional[str] = None
    role: Optional[str] = None
    id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass
class Driver(WireModel):
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        "name": "name",
        "email": "email",
        "current_shift_hours": "currentShiftHours",
        "is_active": "isActive",
        "past_7_day_hours": "past7DayHours",
    }

    name: str = ""
    email: Optional[str] = None
    current_shift_hours: float = 0
    is_active: bool = True
    past_7_day_hours: List[float] = field(default_factory=list)
    id: Optional[str] = None


@dataclass
class Route(WireModel):
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        "route_id": "routeId",
        "distance_km": "distanceKm",
        "traffic_level": "trafficLevel",
        "base_time_minutes": "baseTimeMinutes",
    }

    route_id: str = ""
    distance_km: float = 0
    traffic_level: str = TRAFFIC_LOW
    base_time_minutes: int = 1
    id: Optional[str] = None

    @property
    def choice_label(self) -> str:
        return f"{self.route_id} ({self.distance_km} km, {self.traffic_level} traffic)"


@dataclass
class Order(WireModel):
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        "order_id": "orderId",
        "value_rs": "valueRs",
        "assigned_route_id": "assignedRouteId",
        "status": "status",
    }

    order_id: str = ""
    value_rs: float = 0
    assigned_route_id: str = ""
    status: str = ORDER_PENDING
    id: Optional[str] = None


# ==================================================
# SIMULATION RESULT (IMMUTABLE)
# ==================================================

@dataclass(frozen=True)
class SimulationParams:
    number_of_drivers: int = 5
    route_start_time: str = "09:00"
    max_hours_per_driver: float = 8

    def to_api(self) -> Dict[str, Any]:
        return {
            "numberOfDrivers": self.number_of_drivers,
            "routeStartTime": self.route_start_time,
            "maxHoursPerDriver": self.max_hours_per_driver,
        }


@dataclass(frozen=True)
class Kpis:
    total_profit: float
    efficiency: float
    total_deliveries: int
    on_time_deliveries: int
    fuel_cost_breakdown: Tuple[Tuple[str, float], ...]

    @property
    def late_deliveries(self) -> int:
        return self.total_deliveries - self.on_time_deliveries

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Kpis":
        breakdown = data.get("fuelCostBreakdown") or {}
        return cls(
            total_profit=data.get("totalProfit", 0),
            efficiency=data.get("efficiency", 0),
            total_deliveries=data.get("totalDeliveries", 0),
            on_time_deliveries=data.get("onTimeDeliveries", 0),
            # (level, cost) pairs in server key order
            fuel_cost_breakdown=tuple(breakdown.items()),
        )


@dataclass(frozen=True)
class OrderOutcome:
    order_id: str
    value_rs: float
    assigned_driver: Optional[str]
    on_time: bool
    profit: float

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "OrderOutcome":
        return cls(
            order_id=data.get("orderId", ""),
            value_rs=data.get("valueRs", 0),
            assigned_driver=data.get("assignedDriver"),
            on_time=bool(data.get("onTime", False)),
            profit=data.get("profit", 0),
        )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class SimulationResult:
    id: Optional[str]
    created_at: Optional[datetime]
    kpis: Kpis
    per_order: Tuple[OrderOutcome, ...]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SimulationResult":
        return cls(
            id=_server_id(data),
            created_at=_parse_timestamp(data.get("createdAt")),
            kpis=Kpis.from_api(data.get("kpis") or {}),
            per_order=tuple(OrderOutcome.from_api(o) for o in data.get("perOrder") or []),
        )
