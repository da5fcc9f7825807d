"""Flask extension that enforces a route firewall."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from flask import Flask, Response, current_app, g, jsonify, make_response, request, session
from flask.sessions import NullSession
from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, Rule

from route_firewall._decision import Decision
from route_firewall._firewall import DenialCallback, Firewall, RequestInfo, UserAdapter
from route_firewall.compiler._table import RouteGuard
from route_firewall.config._config import FirewallConfig
from route_firewall.exceptions import FirewallError
from route_firewall.policy._base import RouteSpec

__all__ = ["FirewallExtension"]


class FirewallExtension:
    """Flask extension that runs a :class:`~route_firewall.Firewall` before each request.

    Guarded routes are matched with private werkzeug ``Map``s, so path
    patterns use Flask's ``<converter:name>`` syntax. Every matching
    guard must allow the request, checked in declaration order. The
    resolved user is stored on ``flask.g`` (attribute
    ``config.user_state_key``) and the session-stored return target uses
    ``flask.session`` when the app has a secret key.

    The engine is async, so the app needs Flask's async support
    (``pip install flask[async]``).

    Supports the Flask app-factory pattern via ``init_app()``.

    Args:
        app: Optional Flask application. If provided, calls ``init_app()``
            immediately.
        routes: ``RouteSpec`` objects or mappings.
        user_adapter: ``(RequestInfo) -> user | None``, sync or async.
        on_unauthenticated: ``(request) -> response value``. Any value
            Flask accepts as a view return value, or ``None``.
        on_unauthorized: Same contract, for authenticated users that
            lack access.
        config: Optional config. Defaults to the global config.
        register_error_handlers: Register a JSON 500 handler for
            :class:`~route_firewall.exceptions.FirewallError`.

    Example::

        from flask import Flask, redirect
        from route_firewall.adapters import session_based
        from route_firewall.integrations.flask import FirewallExtension

        app = Flask(__name__)
        firewall = FirewallExtension(
            app,
            routes=[{"path": "/admin", "access": "ADMIN"}],
            user_adapter=session_based(load_user),
            on_unauthenticated=lambda request: redirect("/login"),
            on_unauthorized=lambda request: ("Forbidden", 403),
        )
    """

    def __init__(
        self,
        app: Flask | None = None,
        *,
        routes: Iterable[RouteSpec | Mapping[str, Any]],
        user_adapter: UserAdapter,
        on_unauthenticated: DenialCallback,
        on_unauthorized: DenialCallback,
        config: FirewallConfig | None = None,
        register_error_handlers: bool = True,
    ) -> None:
        self.firewall = Firewall(
            routes,
            user_adapter,
            on_unauthenticated,
            on_unauthorized,
            config=config,
        )
        # One map per guard: a shared Map would return only its best match.
        self._matchers: tuple[tuple[Map, RouteGuard], ...] = tuple(
            (
                Map(
                    [Rule(guard.path, endpoint=guard.path, methods=[guard.method.upper()])],
                    strict_slashes=False,
                ),
                guard,
            )
            for guard in self.firewall.table.guards()
        )
        self._register_error_handlers = register_error_handlers

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Initialize the extension with a Flask application.

        Stores the extension on ``app.extensions["route_firewall"]``,
        registers the ``before_request`` hook and, optionally, the
        error handler for firewall errors.
        """
        app.extensions["route_firewall"] = self
        app.before_request(self._guard_request)

        if self._register_error_handlers:

            @app.errorhandler(FirewallError)
            def handle_firewall_error(exc: FirewallError):  # pyright: ignore[reportUnusedFunction]
                return jsonify({"detail": str(exc)}), 500

    def _matching_guards(self) -> list[RouteGuard]:
        """Every guard whose rule matches the request, in declaration order."""
        matched: list[RouteGuard] = []
        for url_map, guard in self._matchers:
            try:
                url_map.bind("localhost").match(request.path, method=request.method)
            except HTTPException:
                continue
            matched.append(guard)
        return matched

    async def _guard_request(self) -> Response | None:
        firewall = self.firewall
        cfg = firewall.config

        query = request.query_string.decode("latin-1")
        info = RequestInfo(
            method=request.method.lower(),
            path=request.path,
            full_path=f"{request.path}?{query}" if query else request.path,
            session=None if isinstance(session, NullSession) else session,
            user=g.get(cfg.user_state_key),
            request=request,
        )
        user = await firewall.resolve_user(info)
        setattr(g, cfg.user_state_key, user)

        evaluation = await firewall.check_guards(self._matching_guards(), user)
        if evaluation is None or evaluation.allowed:
            return None

        if evaluation.decision is Decision.UNAUTHENTICATED:
            setattr(g, cfg.return_to_key, firewall.record_return_to(info))

        result = await firewall.deny(evaluation.decision, request._get_current_object())
        return _denial_response(result, evaluation.decision)


def _denial_response(result: Any, decision: Decision) -> Response:
    """``None`` becomes an empty 401/403; a 2xx status is replaced with it."""
    status = decision.status_code
    if result is None:
        return current_app.response_class(status=status)
    response = make_response(result)
    if 200 <= response.status_code < 300:
        response.status_code = status
    return response
