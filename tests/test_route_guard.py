from conftest import ADMIN
from opsconsole.core.navigation import Location, login_return_target
from opsconsole.core.route_guard import (
    GUARD_AUTHENTICATED,
    GUARD_LOADING,
    GUARD_UNAUTHENTICATED,
)


def test_loading_before_session_resolves(ctx):
    ctx.navigator.navigate("/orders")

    decision = ctx.guard.evaluate(ctx.sessions.session)

    assert decision.state == GUARD_LOADING
    assert not decision.may_render
    assert ctx.navigator.location.path == "/orders"


def test_authenticated_session_renders(logged_in):
    decision = logged_in.guard.evaluate(logged_in.sessions.session, Location("/routes"))

    assert decision.state == GUARD_AUTHENTICATED
    assert decision.may_render


def test_unauthenticated_redirects_with_origin(ctx):
    ctx.sessions.restore()

    decision = ctx.guard.evaluate(ctx.sessions.session, Location("/orders"))

    assert decision.state == GUARD_UNAUTHENTICATED
    assert decision.redirect_to.path == "/login"
    assert decision.redirect_to.state["from"].path == "/orders"
    assert ctx.navigator.location.path == "/login"


def test_decision_is_stable_within_one_resolution(ctx, http):
    ctx.sessions.restore()
    first = ctx.guard.evaluate(ctx.sessions.session, Location("/dashboard"))

    # Failed login does not resolve a new session
    http.add("POST", "/auth/login", status=400, body={"error": "Invalid credentials"})
    ctx.sessions.login("admin@logistics.com", "bad")
    second = ctx.guard.evaluate(ctx.sessions.session, Location("/dashboard"))

    assert first.state == second.state == GUARD_UNAUTHENTICATED


def test_new_resolution_after_login(ctx, http):
    ctx.sessions.restore()
    ctx.guard.evaluate(ctx.sessions.session, Location("/dashboard"))

    http.add("POST", "/auth/login", body={"token": "tok", "user": ADMIN})
    ctx.sessions.login("admin@logistics.com", "admin123")

    decision = ctx.guard.evaluate(ctx.sessions.session, Location("/dashboard"))
    assert decision.state == GUARD_AUTHENTICATED


def test_login_return_target():
    origin = Location("/orders")
    assert login_return_target(Location("/login", state={"from": origin})) == origin
    assert login_return_target(Location("/login")).path == "/dashboard"


def test_home_goes_to_dashboard(ctx):
    assert ctx.navigator.location.path == "/dashboard"
    assert ctx.navigator.navigate("/").path == "/dashboard"


def test_only_login_is_public(ctx):
    assert ctx.guard.is_public(Location("/login"))
    assert not ctx.guard.is_public(Location("/dashboard"))
    assert not ctx.guard.is_public(Location("/simulation/sim-1"))
