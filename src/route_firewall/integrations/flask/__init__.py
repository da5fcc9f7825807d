"""Flask integration for route-firewall."""

from __future__ import annotations

try:
    import flask as _flask_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _flask_check
except ImportError as exc:
    raise ImportError(
        "Flask integration requires flask. Install it with: pip install route-firewall[flask]"
    ) from exc

from route_firewall.integrations.flask._extension import FirewallExtension

__all__ = ["FirewallExtension"]
