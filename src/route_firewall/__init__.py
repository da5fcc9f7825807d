"""route-firewall — declarative route access control for web apps.

Declare, per route, who may reach it: everyone (``PUBLIC``), any signed-in
user (``AUTHENTICATED``), or holders of one of a set of roles. The firewall
answers each request with allow, 401 or 403.

Example::

    from route_firewall import AUTHENTICATED, PUBLIC, Firewall
    from route_firewall.adapters import session_based

    firewall = Firewall(
        [
            {"path": "/members", "access": ["MEMBER", "ADMIN"]},
            {"path": "/login", "access": PUBLIC, "method": "POST"},
            {"path": "/profile", "access": AUTHENTICATED},
            {"path": "/admin", "access": "ADMIN"},
        ],
        session_based(load_user),
        on_unauthenticated=render_login,
        on_unauthorized=render_forbidden,
    )
"""

from importlib.metadata import PackageNotFoundError, version

from route_firewall._decision import AccessEvaluation, Decision
from route_firewall._engine import decide, evaluate_access
from route_firewall._firewall import Firewall, RequestInfo
from route_firewall._roles import check_roles
from route_firewall._types import ApprovableUser, UserLike
from route_firewall.compiler._table import RouteGuard, RouteTable, compile_routes
from route_firewall.config._config import FirewallConfig, configure
from route_firewall.exceptions import (
    FirewallError,
    RoleCheckError,
    RouteConfigError,
    UserResolutionError,
)
from route_firewall.explain._route import explain_route
from route_firewall.policy._access import AUTHENTICATED, PUBLIC
from route_firewall.policy._base import RouteSpec, load_routes

try:
    __version__ = version("route-firewall")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "AUTHENTICATED",
    "PUBLIC",
    "AccessEvaluation",
    "ApprovableUser",
    "Decision",
    "Firewall",
    "FirewallConfig",
    "FirewallError",
    "RequestInfo",
    "RoleCheckError",
    "RouteConfigError",
    "RouteGuard",
    "RouteSpec",
    "RouteTable",
    "UserLike",
    "UserResolutionError",
    "check_roles",
    "compile_routes",
    "configure",
    "decide",
    "evaluate_access",
    "explain_route",
    "load_routes",
]
