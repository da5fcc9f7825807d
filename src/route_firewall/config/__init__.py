"""Configuration module for route-firewall."""

from __future__ import annotations

from route_firewall.config._config import FirewallConfig, configure, get_global_config

__all__ = ["FirewallConfig", "configure", "get_global_config"]
