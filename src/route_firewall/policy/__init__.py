"""Access declarations — sentinels and route specs."""

from route_firewall.policy._access import AUTHENTICATED, PUBLIC, RESERVED, normalize_access
from route_firewall.policy._base import DEFAULT_METHOD, RouteSpec, load_routes

__all__ = [
    "AUTHENTICATED",
    "DEFAULT_METHOD",
    "PUBLIC",
    "RESERVED",
    "RouteSpec",
    "load_routes",
    "normalize_access",
]
