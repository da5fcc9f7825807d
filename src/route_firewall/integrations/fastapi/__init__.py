"""FastAPI / Starlette integration for route-firewall."""

from __future__ import annotations

try:
    import fastapi as _fastapi_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _fastapi_check
except ImportError as exc:
    raise ImportError(
        "FastAPI integration requires fastapi. "
        "Install it with: pip install route-firewall[fastapi]"
    ) from exc

from route_firewall.integrations.fastapi._dependencies import get_user
from route_firewall.integrations.fastapi._middleware import FirewallMiddleware, install_firewall

__all__ = ["FirewallMiddleware", "get_user", "install_firewall"]
