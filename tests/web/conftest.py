"""Web test fixtures: TestClient with a fixed merchant configuration."""

from __future__ import annotations

import pytest

from convite.settings import Settings


@pytest.fixture(autouse=True)
def web_settings(monkeypatch):
    """Point the web app at a known PIX receiver."""
    test_settings = Settings(
        _env_file=None,
        pix_key="festa@example.com",
        pix_merchant_name="JOÃO DA SILVA",
        pix_merchant_city="SÃO PAULO",
    )

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "settings", test_settings)
    return test_settings


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)
