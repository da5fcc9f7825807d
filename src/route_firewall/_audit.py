"""Audit logging for firewall decisions."""

from __future__ import annotations

import logging

from route_firewall._decision import AccessEvaluation

__all__ = ["log_decision", "log_route_compiled"]

logger = logging.getLogger("route_firewall")


def log_decision(
    evaluation: AccessEvaluation,
    *,
    user: object,
    method: str | None = None,
    path: str | None = None,
) -> None:
    """Log a single access decision.

    Logging levels:
    - INFO: Summary (route, decision, reason)
    - DEBUG: Detailed (access requirement, role result, approval flag)
    - WARNING: A user hit a route with no declared policy

    Example::

        log_decision(evaluation, user=current_user, method="get", path="/admin")
    """
    route = f"{method.upper()} {path}" if method and path else "<direct>"

    if evaluation.reason == "no_policy":
        logger.warning(
            "No access policy declared for %s; denying user %r",
            route,
            user,
        )
        return

    logger.info(
        "Firewall decision: %s -> %s (%s)",
        route,
        evaluation.decision.name,
        evaluation.reason,
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Decision detail for %s: access=%r role_checked=%s role_result=%s "
            "approved=%s user=%r",
            route,
            evaluation.access,
            evaluation.role_checked,
            evaluation.role_result,
            evaluation.approved,
            user,
        )


def log_route_compiled(*, method: str, path: str, guarded: bool) -> None:
    """Log one route being compiled into (or skipped from) the route table."""
    compiler_logger = logging.getLogger("route_firewall.compiler")
    compiler_logger.debug(
        "%s %s %s",
        "Guarding" if guarded else "Skipping public route",
        method.upper(),
        path,
    )
