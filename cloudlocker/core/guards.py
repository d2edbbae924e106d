# cloudlocker/core/guards.py
"""
Route gating. Decisions are a pure function of the auth state and are
re-evaluated on every navigation and every auth change.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

LOGIN = "/login"
REGISTER = "/register"
DASHBOARD = "/"

PUBLIC_ROUTES = (LOGIN, REGISTER)
PROTECTED_ROUTES = (DASHBOARD,)
ROUTES = PUBLIC_ROUTES + PROTECTED_ROUTES


class Gate(str, Enum):
	PLACEHOLDER = "placeholder"
	REDIRECT = "redirect"
	RENDER = "render"


@dataclass(frozen=True)
class GateDecision:
	gate: Gate
	route: str
	redirect_to: Optional[str] = None


def protected_gate(auth, route: str = DASHBOARD) -> GateDecision:
	if auth.loading:
		return GateDecision(Gate.PLACEHOLDER, route)
	if not auth.is_authenticated:
		return GateDecision(Gate.REDIRECT, route, LOGIN)
	return GateDecision(Gate.RENDER, route)


def public_gate(auth, route: str = LOGIN) -> GateDecision:
	if auth.loading:
		return GateDecision(Gate.PLACEHOLDER, route)
	if auth.is_authenticated:
		return GateDecision(Gate.REDIRECT, route, DASHBOARD)
	return GateDecision(Gate.RENDER, route)


def gate_for(auth, route: str) -> GateDecision:
	if route not in ROUTES:
		route = DASHBOARD
	if route in PUBLIC_ROUTES:
		return public_gate(auth, route)
	return protected_gate(auth, route)


def resolve(auth, route: str) -> GateDecision:
	"""Follow redirects until a page renders or the placeholder shows."""
	seen = set()
	decision = gate_for(auth, route)
	while decision.gate is Gate.REDIRECT and decision.redirect_to not in seen:
		seen.add(decision.route)
		decision = gate_for(auth, decision.redirect_to)
	return decision
