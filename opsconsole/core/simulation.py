"""
SIMULATION & DASHBOARD LOADERS

- SimulationRunner: validate parameters, POST /simulate, keep the result
- load_simulation: GET /simulate/{id} for the details view
- DashboardState: latest simulation + entity counts

A 404 on /simulate/latest means "no simulations yet": an empty state,
not an error banner.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from opsconsole.core.entities import ValidationError
from opsconsole.core.models import SimulationParams, SimulationResult
from opsconsole.core.resource_sync import SESSION_EXPIRED_ERROR
from opsconsole.integrations.api_client import (
    ApiClient,
    ApiError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

GENERIC_SIMULATION_ERROR = "Simulation failed"
GENERIC_DASHBOARD_ERROR = "Failed to load dashboard data"

_START_TIME = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


def validate_params(values: Dict[str, Any]) -> SimulationParams:
    """Coerce simulation form values; raises ValidationError."""
    try:
        drivers = int(values.get("number_of_drivers"))
    except (TypeError, ValueError):
        raise ValidationError("number_of_drivers", "At least 1 driver required")
    if drivers < 1:
        raise ValidationError("number_of_drivers", "At least 1 driver required")

    start = str(values.get("route_start_time") or "").strip()
    if not start:
        raise ValidationError("route_start_time", "Required")
    if not _START_TIME.match(start):
        raise ValidationError("route_start_time", "Use HH:MM")

    try:
        max_hours = float(values.get("max_hours_per_driver"))
    except (TypeError, ValueError):
        raise ValidationError("max_hours_per_driver", "At least 0.5 hours required")
    if max_hours < 0.5:
        raise ValidationError("max_hours_per_driver", "At least 0.5 hours required")

    return SimulationParams(drivers, start, max_hours)


def _error_text(exc: Exception, fallback: str) -> str:
    if isinstance(exc, ValidationError):
        return str(exc)
    if isinstance(exc, ApiError) and not isinstance(exc, TransportError) and exc.server_message:
        return exc.server_message
    return fallback


class SimulationRunner:

    def __init__(self, client: ApiClient):
        self.client = client
        self.result: Optional[SimulationResult] = None
        self.error: Optional[str] = None
        self.running = False

    def run(self, values: Dict[str, Any]) -> Optional[SimulationResult]:
        if self.running:
            return None

        self.error = None
        try:
            params = validate_params(values)
        except ValidationError as e:
            self.error = str(e)
            return None

        self.running = True
        try:
            data = self.client.run_simulation(params.to_api())
            result = SimulationResult.from_api(data)
        except ApiError as e:
            logger.warning(f"Simulation run failed: {e}")
            self.error = _error_text(e, GENERIC_SIMULATION_ERROR)
            return None
        finally:
            self.running = False

        # Previous result stays visible on failure; replaced only on success
        self.result = result
        logger.info(f"Simulation {result.id} completed")
        return result


def load_simulation(client: ApiClient, simulation_id: str) -> Optional[SimulationResult]:
    try:
        return SimulationResult.from_api(client.get_simulation(simulation_id))
    except ApiError as e:
        logger.warning(f"Loading simulation {simulation_id} failed: {e}")
        return None


def load_simulation_history(client: ApiClient) -> List[SimulationResult]:
    try:
        return [SimulationResult.from_api(row) for row in client.get_simulations()]
    except ApiError as e:
        logger.warning(f"Loading simulation history failed: {e}")
        return []


@dataclass
class DashboardState:
    latest: Optional[SimulationResult] = None
    total_drivers: int = 0
    total_routes: int = 0
    total_orders: int = 0
    loading: bool = True
    error: Optional[str] = None

    @property
    def has_simulation(self) -> bool:
        return self.latest is not None


def load_dashboard(client: ApiClient, state: Optional[DashboardState] = None) -> DashboardState:
    """
    Fill the dashboard: latest simulation, then entity counts.

    Failures keep whatever the state already held.
    """
    state = state or DashboardState()
    state.error = None

    try:
        state.latest = SimulationResult.from_api(client.get_latest_simulation())
    except NotFoundError:
        state.latest = None
    except UnauthorizedError:
        # Client already logged out; nothing more is sent without a credential
        state.error = SESSION_EXPIRED_ERROR
        state.loading = False
        return state
    except ApiError as e:
        logger.warning(f"Loading latest simulation failed: {e}")
        state.error = _error_text(e, GENERIC_DASHBOARD_ERROR)

    try:
        drivers = client.list_resources("drivers")
        routes = client.list_resources("routes")
        orders = client.list_resources("orders")
    except ApiError as e:
        logger.warning(f"Loading dashboard summary failed: {e}")
        state.error = _error_text(e, GENERIC_DASHBOARD_ERROR)
    else:
        state.total_drivers = len(drivers)
        state.total_routes = len(routes)
        state.total_orders = len(orders)

    state.loading = False
    return state
