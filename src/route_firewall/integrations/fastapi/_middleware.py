"""Starlette/FastAPI middleware that enforces a route firewall."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match, Route
from starlette.types import ASGIApp, Scope

from route_firewall._decision import Decision
from route_firewall._firewall import DenialCallback, Firewall, RequestInfo, UserAdapter
from route_firewall.compiler._table import RouteGuard
from route_firewall.config._config import FirewallConfig
from route_firewall.policy._base import RouteSpec

__all__ = ["FirewallMiddleware", "install_firewall"]


async def _unreachable(request: Request) -> Response:  # pragma: no cover
    raise RuntimeError("Firewall matchers are never dispatched to")


def _full_path(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _denial_response(result: Any, decision: Decision) -> Response:
    """Turn a callback result into the response sent for a denial.

    ``None`` becomes an empty 401/403. A 2xx status is replaced with
    the denial status; anything else (redirects, custom errors) is kept.
    """
    status = decision.status_code
    if result is None:
        return Response(status_code=status)
    if not isinstance(result, Response):
        raise TypeError(
            f"Firewall callbacks must return a starlette Response or None, "
            f"got {type(result).__name__}"
        )
    if 200 <= result.status_code < 300:
        result.status_code = status
    return result


class FirewallMiddleware(BaseHTTPMiddleware):
    """Enforce a :class:`~route_firewall.Firewall` on every HTTP request.

    For each request the user adapter runs first and its result is
    stored on ``request.state`` (attribute ``config.user_state_key``).
    The request is then matched against the guarded routes using
    Starlette's own path matching, so patterns use ``{param}`` syntax.
    Every matching guard must allow the request; they are checked in
    declaration order and the first denial wins. Unguarded requests
    continue down the stack untouched.

    Engine errors (failing user adapter or role check) are not caught;
    they reach Starlette's server-error handling like any other exception.

    Example::

        app.add_middleware(FirewallMiddleware, firewall=firewall)
        app.add_middleware(SessionMiddleware, secret_key="...")  # outermost
    """

    def __init__(self, app: ASGIApp, *, firewall: Firewall) -> None:
        super().__init__(app)
        self._firewall = firewall
        self._matchers: tuple[tuple[Route, RouteGuard], ...] = tuple(
            (Route(guard.path, endpoint=_unreachable, methods=[guard.method.upper()]), guard)
            for guard in firewall.table.guards()
        )

    @property
    def firewall(self) -> Firewall:
        return self._firewall

    def _matching_guards(self, scope: Scope) -> list[RouteGuard]:
        """Every guard whose pattern fully matches, in declaration order."""
        matched: list[RouteGuard] = []
        for route, guard in self._matchers:
            match, _ = route.matches(scope)
            if match == Match.FULL:
                matched.append(guard)
        return matched

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Resolve the user, decide, then continue or deny."""
        firewall = self._firewall
        cfg = firewall.config

        info = RequestInfo(
            method=request.method.lower(),
            path=request.url.path,
            full_path=_full_path(request),
            session=request.session if "session" in request.scope else None,
            user=getattr(request.state, cfg.user_state_key, None),
            request=request,
        )
        user = await firewall.resolve_user(info)
        setattr(request.state, cfg.user_state_key, user)

        evaluation = await firewall.check_guards(self._matching_guards(request.scope), user)
        if evaluation is None or evaluation.allowed:
            return await call_next(request)

        if evaluation.decision is Decision.UNAUTHENTICATED:
            setattr(request.state, cfg.return_to_key, firewall.record_return_to(info))

        result = await firewall.deny(evaluation.decision, request)
        return _denial_response(result, evaluation.decision)


def install_firewall(
    app: Any,
    routes: Iterable[RouteSpec | Mapping[str, Any]],
    user_adapter: UserAdapter,
    on_unauthenticated: DenialCallback,
    on_unauthorized: DenialCallback,
    *,
    config: FirewallConfig | None = None,
) -> Firewall:
    """Build a firewall and install it as middleware on a FastAPI/Starlette app.

    The firewall is also stored on ``app.state.route_firewall``.
    Session-based adapters need ``SessionMiddleware``; add it *after*
    this call so it wraps the firewall.

    Returns:
        The installed :class:`~route_firewall.Firewall`.

    Example::

        from fastapi import FastAPI
        from route_firewall.adapters import session_based
        from route_firewall.integrations.fastapi import install_firewall

        app = FastAPI()
        install_firewall(
            app,
            [{"path": "/admin", "access": "ADMIN"}],
            session_based(load_user),
            on_unauthenticated=lambda request: RedirectResponse("/login", 303),
            on_unauthorized=lambda request: PlainTextResponse("Forbidden", 403),
        )
        app.add_middleware(SessionMiddleware, secret_key=SECRET)
    """
    firewall = Firewall(
        routes,
        user_adapter,
        on_unauthenticated,
        on_unauthorized,
        config=config,
    )
    app.state.route_firewall = firewall
    app.add_middleware(FirewallMiddleware, firewall=firewall)
    return firewall
