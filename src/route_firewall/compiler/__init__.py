"""Route table compilation."""

from route_firewall.compiler._table import RouteGuard, RouteTable, compile_routes

__all__ = ["RouteGuard", "RouteTable", "compile_routes"]
