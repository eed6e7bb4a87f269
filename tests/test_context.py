import pytest

from conftest import ADMIN, BASE_URL
from opsconsole.config import Settings
from opsconsole.context import build_context
from opsconsole.storage.session_store import (
    FileSessionStore,
    MemorySessionStore,
    new_browser_id,
    session_file_for,
)

OTHER = {"id": "u2", "email": "dispatch@logistics.com", "name": "Dispatch", "role": "user"}


@pytest.fixture
def shared_settings(tmp_path):
    return Settings(api_url=BASE_URL, api_timeout=1, session_dir=str(tmp_path / "sessions"))


def test_browsers_do_not_share_a_session(shared_settings, http):
    tab_a = build_context(shared_settings, new_browser_id(), http=http)
    visitor = build_context(shared_settings, new_browser_id(), http=http)
    http.add("POST", "/auth/login", body={"token": "tok-A", "user": ADMIN})
    http.add("GET", "/auth/me", body=ADMIN)

    tab_a.sessions.login("admin@logistics.com", "admin123")
    http.calls.clear()
    visitor.sessions.restore()

    assert not visitor.sessions.session.is_authenticated
    assert visitor.store.token() is None
    assert http.calls == []


def test_one_browser_logging_in_leaves_another_token_alone(shared_settings, http):
    tab_a = build_context(shared_settings, new_browser_id(), http=http)
    tab_b = build_context(shared_settings, new_browser_id(), http=http)
    http.add("POST", "/auth/login", body={"token": "tok-A", "user": ADMIN})
    tab_a.sessions.login("admin@logistics.com", "admin123")
    http.add("POST", "/auth/login", body={"token": "tok-B", "user": OTHER})
    tab_b.sessions.login("dispatch@logistics.com", "dispatch123")

    http.add("GET", "/drivers", body=[])
    http.calls.clear()
    tab_a.client.list_resources("drivers")

    assert http.calls[0].headers["Authorization"] == "Bearer tok-A"

    tab_b.sessions.logout()
    assert tab_a.store.token() == "tok-A"


def test_same_browser_restores_its_own_session(shared_settings, http):
    browser_id = new_browser_id()
    first = build_context(shared_settings, browser_id, http=http)
    http.add("POST", "/auth/login", body={"token": "tok-A", "user": ADMIN})
    first.sessions.login("admin@logistics.com", "admin123")

    http.add("GET", "/auth/me", body=ADMIN)
    reloaded = build_context(shared_settings, browser_id, http=http)
    reloaded.sessions.restore()

    assert isinstance(reloaded.store, FileSessionStore)
    assert reloaded.sessions.session.is_authenticated


def test_unknown_browser_gets_memory_store(shared_settings):
    assert isinstance(build_context(shared_settings).store, MemorySessionStore)


@pytest.mark.parametrize("browser_id", ["../../etc/passwd", "short", "", "x" * 31 + "/"])
def test_session_file_rejects_bad_browser_ids(tmp_path, browser_id):
    with pytest.raises(ValueError):
        session_file_for(str(tmp_path), browser_id)
