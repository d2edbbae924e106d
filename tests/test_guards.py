"""Tests for route gating."""

from types import SimpleNamespace

import pytest

from cloudlocker.core import guards
from cloudlocker.core.guards import Gate


def auth_state(loading=False, authenticated=False):
    return SimpleNamespace(loading=loading, is_authenticated=authenticated)


class TestWhileLoading:
    @pytest.mark.parametrize("route", [guards.DASHBOARD, guards.LOGIN, guards.REGISTER])
    def test_placeholder_never_redirect(self, route):
        d = guards.gate_for(auth_state(loading=True), route)
        assert d.gate is Gate.PLACEHOLDER
        assert d.redirect_to is None

    def test_resolve_keeps_requested_route(self):
        d = guards.resolve(auth_state(loading=True), guards.LOGIN)
        assert d.gate is Gate.PLACEHOLDER
        assert d.route == guards.LOGIN


class TestProtected:
    def test_anonymous_is_sent_to_login(self):
        d = guards.protected_gate(auth_state())
        assert d.gate is Gate.REDIRECT
        assert d.redirect_to == guards.LOGIN

    def test_authenticated_renders(self):
        assert guards.protected_gate(auth_state(authenticated=True)).gate is Gate.RENDER


class TestPublic:
    @pytest.mark.parametrize("route", [guards.LOGIN, guards.REGISTER])
    def test_authenticated_is_sent_home(self, route):
        d = guards.public_gate(auth_state(authenticated=True), route)
        assert d.gate is Gate.REDIRECT
        assert d.redirect_to == guards.DASHBOARD

    def test_anonymous_renders(self):
        assert guards.public_gate(auth_state(), guards.REGISTER).gate is Gate.RENDER


class TestResolve:
    def test_anonymous_dashboard_lands_on_login(self):
        d = guards.resolve(auth_state(), guards.DASHBOARD)
        assert (d.gate, d.route) == (Gate.RENDER, guards.LOGIN)

    def test_authenticated_login_lands_on_dashboard(self):
        d = guards.resolve(auth_state(authenticated=True), guards.LOGIN)
        assert (d.gate, d.route) == (Gate.RENDER, guards.DASHBOARD)

    def test_unknown_route_goes_home(self):
        d = guards.resolve(auth_state(authenticated=True), "/nowhere")
        assert (d.gate, d.route) == (Gate.RENDER, guards.DASHBOARD)
        d = guards.resolve(auth_state(), "/nowhere")
        assert (d.gate, d.route) == (Gate.RENDER, guards.LOGIN)
