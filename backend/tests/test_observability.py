"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib

from app.observability import client as client_module


class _DummyOpik:
    def __init__(self, *args, **kwargs):
        self.kwargs = kwargs


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import app.main as main_module

    client_module.reset_opik_client()
    reloaded_app = importlib.reload(main_module)

    assert hasattr(reloaded_app, "app")
    assert client_module.get_opik_client() is None


def test_opik_client_needs_api_key(monkeypatch) -> None:
    monkeypatch.setattr(client_module, "Opik", _DummyOpik)
    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", None)
    client_module.reset_opik_client()

    try:
        assert client_module.init_opik() is None
    finally:
        client_module.reset_opik_client()


def test_opik_client_initialized_once(monkeypatch) -> None:
    monkeypatch.setattr(client_module, "Opik", _DummyOpik)
    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", "opik-key")
    monkeypatch.setattr(client_module.settings, "opik_project", "microwin-test")
    client_module.reset_opik_client()

    try:
        first = client_module.get_opik_client()
        second = client_module.get_opik_client()
        assert isinstance(first, _DummyOpik)
        assert first is second
        assert first.kwargs == {"project_name": "microwin-test", "api_key": "opik-key"}
    finally:
        client_module.reset_opik_client()
