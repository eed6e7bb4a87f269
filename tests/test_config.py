from opsconsole.config import DEFAULT_API_URL, load_settings


def test_defaults(monkeypatch):
    for name in ("OPSCONSOLE_API_URL", "OPSCONSOLE_API_TIMEOUT", "OPSCONSOLE_ORDER_PREVIEW_LIMIT"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.api_url == DEFAULT_API_URL
    assert settings.api_timeout == 10
    assert settings.order_preview_limit == 10


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OPSCONSOLE_API_URL", "https://ops.example.com/api/")
    monkeypatch.setenv("OPSCONSOLE_API_TIMEOUT", "2.5")
    monkeypatch.setenv("OPSCONSOLE_ORDER_PREVIEW_LIMIT", "not-a-number")
    monkeypatch.setenv("OPSCONSOLE_LOG_LEVEL", "debug")
    monkeypatch.setenv("OPSCONSOLE_SESSION_DIR", "/var/lib/opsconsole")

    settings = load_settings()

    assert settings.api_url == "https://ops.example.com/api"
    assert settings.api_timeout == 2.5
    assert settings.order_preview_limit == 10
    assert settings.log_level == "DEBUG"
    assert settings.session_dir == "/var/lib/opsconsole"
