"""Import fixtures from route_firewall.testing for test discovery."""

from route_firewall.testing._fixtures import firewall_config, isolated_firewall_config

__all__ = ["firewall_config", "isolated_firewall_config"]
