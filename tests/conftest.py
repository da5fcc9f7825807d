"""Shared test fixtures for route-firewall tests."""

from __future__ import annotations

import pytest

from route_firewall.compiler._table import RouteTable, compile_routes
from route_firewall.config._config import _reset_global_config

# ---------------------------------------------------------------------------
# Route declarations
# ---------------------------------------------------------------------------

SCENARIO_ROUTES: tuple[dict[str, object], ...] = (
    {"path": "/members", "access": ["MEMBER", "ADMIN"]},
    {"path": "/public", "access": "PUBLIC", "method": "POST"},
    {"path": "/x"},
    {"path": "/profile", "access": "AUTHENTICATED"},
    {"path": "/admin", "access": "ADMIN"},
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_global_config():
    """Every test starts and ends with the default global config."""
    _reset_global_config()
    yield
    _reset_global_config()


@pytest.fixture()
def scenario_routes() -> list[dict[str, object]]:
    """A fresh copy of the reference route list for each test."""
    return [dict(route) for route in SCENARIO_ROUTES]


@pytest.fixture()
def table(scenario_routes) -> RouteTable:
    return compile_routes(scenario_routes)
