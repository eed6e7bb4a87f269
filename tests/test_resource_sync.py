import pytest
import requests

from opsconsole.core.entities import ValidationError, parse_hours_list
from opsconsole.core.models import Driver, Order, Route
from opsconsole.core.resource_sync import (
    driver_synchronizer,
    order_synchronizer,
    route_synchronizer,
)

ROUTE_R1 = {"_id": "r1", "routeId": "R1", "distanceKm": 5, "trafficLevel": "Low", "baseTimeMinutes": 20}
ROUTE_R2 = {"_id": "r2", "routeId": "R2", "distanceKm": 12, "trafficLevel": "High", "baseTimeMinutes": 45}
ORDER_O1 = {"_id": "o1", "orderId": "O1", "valueRs": 250, "assignedRouteId": "R1", "status": "Pending"}


@pytest.fixture
def routes(logged_in, http):
    http.add("GET", "/routes", body=[ROUTE_R1, ROUTE_R2])
    sync = route_synchronizer(logged_in.client)
    sync.mount()
    sync.load()
    http.calls.clear()
    return sync


@pytest.fixture
def orders(logged_in, http):
    http.add("GET", "/orders", body=[ORDER_O1])
    sync = order_synchronizer(logged_in.client)
    sync.mount()
    sync.load()
    http.calls.clear()
    return sync


# ------------------------------
# LOAD
# ------------------------------

def test_load_single_route(logged_in, http):
    http.add("GET", "/routes", body=[
        {"routeId": "R1", "distanceKm": 5, "trafficLevel": "Low", "baseTimeMinutes": 20}
    ])
    sync = route_synchronizer(logged_in.client)
    sync.mount()

    assert sync.loading
    assert sync.load()

    assert sync.items == [Route(route_id="R1", distance_km=5, traffic_level="Low", base_time_minutes=20)]
    assert not sync.loading


def test_failed_load_keeps_previous_list(routes, http):
    before = list(routes.items)
    http.add("GET", "/routes", error=requests.exceptions.ConnectionError("down"))

    assert not routes.load()

    assert routes.items == before
    assert routes.error == "Failed to load routes"


def test_first_load_failure_ends_loading(logged_in, http):
    http.add("GET", "/drivers", status=500)
    sync = driver_synchronizer(logged_in.client)
    sync.mount()
    sync.load()

    assert not sync.loading
    assert sync.items == []
    assert sync.error == "Failed to load drivers"


def test_load_keeps_server_order(routes):
    assert [r.route_id for r in routes.items] == ["R1", "R2"]


def test_fetch_one_leaves_list_alone(routes, http):
    http.add("GET", "/routes/r2", body={**ROUTE_R2, "baseTimeMinutes": 50})
    before = list(routes.items)

    fetched = routes.fetch_one("r2")

    assert fetched.base_time_minutes == 50
    assert routes.items == before


def test_fetch_one_missing_entity(routes):
    assert routes.fetch_one("nope") is None
    assert routes.error == "Not found"


# ------------------------------
# CREATE
# ------------------------------

def test_create_appends_server_object(orders, http):
    http.add("POST", "/orders", status=201, body={
        "id": "x1", "orderId": "O9", "valueRs": 500, "assignedRouteId": "R1", "status": "Pending",
    })
    size = len(orders.items)

    created = orders.create({"order_id": "O9", "value_rs": 500, "assigned_route_id": "R1", "status": "Pending"})

    assert len(orders.items) == size + 1
    assert orders.items[-1] is created
    assert created == Order(order_id="O9", value_rs=500, assigned_route_id="R1", status="Pending", id="x1")
    assert http.calls[0].json == {"orderId": "O9", "valueRs": 500.0, "assignedRouteId": "R1", "status": "Pending"}


def test_failed_create_leaves_list_untouched(orders, http):
    before = list(orders.items)
    http.add("POST", "/orders", status=400, body={"error": "Order ID already exists"})

    assert orders.create({"order_id": "O1", "value_rs": 10, "assigned_route_id": "R1"}) is None

    assert orders.items == before
    assert orders.error == "Order ID already exists"


def test_create_transport_failure_uses_generic_message(routes, http):
    http.add("POST", "/routes", error=requests.exceptions.ConnectionError("down"))

    routes.create({"route_id": "R3", "distance_km": 1, "traffic_level": "Low", "base_time_minutes": 5})

    assert routes.error == "Failed to save route"
    assert len(routes.items) == 2


def test_invalid_draft_never_reaches_server(routes, http):
    assert routes.create({"route_id": "R3", "distance_km": 0, "traffic_level": "Low", "base_time_minutes": 5}) is None

    assert routes.error == "Distance must be positive"
    assert http.calls == []


def test_create_disables_while_in_flight(orders, http):
    seen = []
    http.add("POST", "/orders", body={"id": "x2", "orderId": "O2", "valueRs": 1, "assignedRouteId": "R1"},
             callback=lambda: seen.append(orders.is_busy("create")))

    orders.create({"order_id": "O2", "value_rs": 1, "assigned_route_id": "R1"})

    assert seen == [True]
    assert not orders.is_busy("create")


# ------------------------------
# UPDATE
# ------------------------------

def test_update_merges_in_place(routes, http):
    http.add("PUT", "/routes/r1", body={"ok": True})

    assert routes.update("r1", {"distance_km": 7.5})

    assert [r.route_id for r in routes.items] == ["R1", "R2"]
    r1 = routes.items[0]
    assert r1.distance_km == 7.5
    assert r1.traffic_level == "Low"
    assert r1.base_time_minutes == 20
    assert routes.items[1] == Route.from_api(ROUTE_R2)


def test_update_never_sends_immutable_fields(routes, orders, http):
    http.add("PUT", "/routes/r2", body={})
    http.add("PUT", "/orders/o1", body={})

    routes.update("r2", {"route_id": "HACKED", "traffic_level": "Medium"})
    orders.update("o1", {"order_id": "HACKED", "status": "Delivered"})

    assert http.calls_to("PUT", "/routes/r2")[0].json == {"trafficLevel": "Medium"}
    assert http.calls_to("PUT", "/orders/o1")[0].json == {"status": "Delivered"}
    assert routes.items[1].route_id == "R2"
    assert orders.items[0].order_id == "O1"
    assert orders.items[0].status == "Delivered"


def test_failed_update_changes_nothing(routes, http):
    before = list(routes.items)
    http.add("PUT", "/routes/r1", status=422, body={"error": "Distance too large"})

    assert not routes.update("r1", {"distance_km": 9999})

    assert routes.items == before
    assert routes.error == "Distance too large"


# ------------------------------
# REMOVE
# ------------------------------

def test_remove_requires_confirmation(routes, http):
    http.add("DELETE", "/routes/r1", status=204)

    assert not routes.remove("r1", confirm=lambda: False)
    assert not routes.remove("r1", confirm=False)

    assert http.calls == []
    assert len(routes.items) == 2


def test_confirmed_remove_drops_entry(routes, http):
    http.add("DELETE", "/routes/r1", status=204)

    assert routes.remove("r1", confirm=lambda: True)

    assert [r.route_id for r in routes.items] == ["R2"]


def test_failed_remove_keeps_entry(routes, http):
    http.add("DELETE", "/routes/r1", status=409, body={"error": "Route has orders"})

    assert not routes.remove("r1", confirm=True)

    assert len(routes.items) == 2
    assert routes.error == "Route has orders"


# ------------------------------
# STALE RESPONSES
# ------------------------------

def test_response_after_unmount_is_discarded(logged_in, http):
    sync = driver_synchronizer(logged_in.client)
    http.add("GET", "/drivers", body=[{"_id": "d1", "name": "Asha"}], callback=sync.unmount)
    sync.mount()

    assert not sync.load()
    assert sync.items == []


def test_remount_issues_fresh_requests(logged_in, http):
    sync = driver_synchronizer(logged_in.client)
    http.add("GET", "/drivers", body=[{"_id": "d1", "name": "Asha", "isActive": True}])
    sync.mount()
    sync.unmount()
    sync.mount()

    assert sync.load()
    assert sync.items == [Driver(name="Asha", is_active=True, id="d1")]


# ------------------------------
# DRIVER FORM PARSING
# ------------------------------

def test_driver_draft_parses_hours(logged_in, http):
    http.add("POST", "/drivers", body={"_id": "d9", "name": "Ravi", "past7DayHours": [7, 8, 6]})
    sync = driver_synchronizer(logged_in.client)

    sync.create({"name": " Ravi ", "email": "", "current_shift_hours": "4", "past_7_day_hours": "7, 8,6"})

    payload = http.calls_to("POST", "/drivers")[0].json
    assert payload["name"] == "Ravi"
    assert payload["email"] is None
    assert payload["currentShiftHours"] == 4.0
    assert payload["isActive"] is True
    assert payload["past7DayHours"] == [7.0, 8.0, 6.0]


def test_parse_hours_list_rejects_garbage():
    assert parse_hours_list("h", "") == []
    assert parse_hours_list("h", [1, 2]) == [1.0, 2.0]
    with pytest.raises(ValidationError):
        parse_hours_list("h", "7,x")
    with pytest.raises(ValidationError):
        parse_hours_list("h", "-1")
