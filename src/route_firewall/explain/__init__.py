"""Explain mode — structured insight into firewall decisions."""

from route_firewall._decision import AccessEvaluation, Reason
from route_firewall.explain._route import explain_route

__all__ = ["AccessEvaluation", "Reason", "explain_route"]
