"""FastAPI dependencies for reading the firewall's resolved user."""

from __future__ import annotations

from typing import Any

from fastapi import Request

__all__ = ["get_user"]

_DEFAULT_USER_KEY = "user"


def get_user(request: Request) -> Any:
    """Return the user the firewall resolved for this request, or ``None``.

    Reads ``request.state`` using the installed firewall's
    ``user_state_key`` (``"user"`` when no firewall is found on the app).

    Example::

        @app.get("/profile")
        async def profile(user: User = Depends(get_user)) -> dict:
            return {"name": user.name}
    """
    firewall = getattr(request.app.state, "route_firewall", None)
    key = firewall.config.user_state_key if firewall is not None else _DEFAULT_USER_KEY
    return getattr(request.state, key, None)
