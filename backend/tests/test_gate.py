"""
Tests for the AccessGate facade, the per-request PermissionContext and
navigation permissions.
"""

import pytest
from fastapi import HTTPException

from shared.config.constants import Permissions
from rest_api.services.permissions import (
    ALL,
    HOME,
    AccessGate,
    InMemoryCustomRoleSource,
    LocationRef,
    ONLINE,
    PermissionContext,
    PermissionSet,
    accessible_routes,
    can_access_route,
    first_accessible_page,
)
from rest_api.services.permissions.navigation import FALLBACK_LANDING_PAGE
from tests.conftest import LOC1, LOC2, make_principal


class BrokenRoleSource:
    def lookup_role_permissions(self, role_id):
        raise TimeoutError("slow store")


class TestAccessGate:
    def test_action_and_visibility_are_independent(self, gate, appointments):
        """Visibility does not consult permissions; callers gate actions first."""
        client = make_principal("CLIENT", ["loc1"])
        assert not gate.has_permission(client, Permissions.VIEW_APPOINTMENTS)
        assert [a.id for a in gate.visible_subset(client, appointments, LOC1)] == ["a1", "a2"]

    def test_build_with_override_source(self, location_registry):
        source = InMemoryCustomRoleSource({"MANAGER": [Permissions.VIEW_REPORTS]})
        gate = AccessGate.build(location_registry, source)
        manager = make_principal("MANAGER", ["loc1"])
        assert gate.permissions(manager) == PermissionSet.of(Permissions.VIEW_REPORTS)

    def test_registry_label(self, gate):
        assert gate.registry_label == "builtin-r0"

    def test_staff_record_access(self, gate):
        assert gate.can_access_staff_record(make_principal("ADMIN"), "anyone")
        assert gate.can_access_staff_record(make_principal("MANAGER"), "anyone")
        stylist = make_principal("STAFF", principal_id="sty-home")
        assert gate.can_access_staff_record(stylist, "sty-home")
        assert not gate.can_access_staff_record(stylist, "sty-branch")
        assert not gate.can_access_staff_record(make_principal("RECEPTIONIST"), "sty-home")


class TestOwnAppointments:
    def test_full_calendar_with_view_appointments(self, gate, appointments):
        manager = make_principal("MANAGER", ["loc1"])
        items = gate.visible_appointments(manager, appointments, LOC1)
        assert [(i.resource.id, i.cross_location) for i in items] == [("a1", False), ("a2", True)]

    def test_own_scope_ignores_grant_and_flags_other_locations(self, gate, appointments):
        stylist = make_principal("STAFF", [], principal_id="sty-home")
        items = gate.visible_appointments(stylist, appointments, LOC1)
        assert [(i.resource.id, i.cross_location) for i in items] == [("a1", False), ("a2", True)]

    def test_own_scope_on_other_branch(self, gate, appointments):
        stylist = make_principal("STAFF", ["loc1"], principal_id="sty-home")
        items = gate.visible_appointments(stylist, appointments, LOC2)
        assert [(i.resource.id, i.cross_location) for i in items] == [("a1", True), ("a2", True)]

    def test_own_scope_all_query(self, gate, appointments):
        stylist = make_principal("STAFF", ["loc2"], principal_id="sty-branch")
        items = gate.visible_appointments(stylist, appointments, ALL)
        assert [(i.resource.id, i.cross_location) for i in items] == [("a3", False)]

    def test_neither_permission_sees_nothing(self, gate, appointments):
        client = make_principal("CLIENT", ["all"], principal_id="sty-home")
        assert gate.visible_appointments(client, appointments, ALL) == []

    def test_precomputed_permissions_are_used(self, gate, appointments):
        manager = make_principal("MANAGER", ["loc1"], principal_id="sty-home")
        own_only = PermissionSet.of(Permissions.VIEW_OWN_APPOINTMENTS)
        items = gate.visible_appointments(manager, appointments, ALL, permissions=own_only)
        assert [i.resource.id for i in items] == ["a1", "a2"]

    @pytest.mark.parametrize("query", [HOME, ONLINE], ids=["home", "online"])
    def test_own_scope_reserved_lens_is_empty(self, gate, appointments, query):
        stylist = make_principal("STAFF", ["loc1"], principal_id="sty-home")
        assert gate.visible_appointments(stylist, appointments, query) == []

    def test_own_scope_unknown_branch_is_empty(self, gate, appointments):
        stylist = make_principal("STAFF", ["loc1"], principal_id="sty-home")
        nowhere = LocationRef.physical("nowhere")
        assert gate.visible_appointments(stylist, appointments, nowhere) == []


class TestPermissionContext:
    def test_require_passes_and_denies(self, gate):
        ctx = PermissionContext(gate, make_principal("STAFF"))
        ctx.require(Permissions.VIEW_SERVICES)
        with pytest.raises(HTTPException) as exc_info:
            ctx.require(Permissions.MANAGE_LOCATIONS)
        assert exc_info.value.status_code == 403

    def test_require_any(self, gate):
        ctx = PermissionContext(gate, make_principal("STAFF"))
        ctx.require_any(Permissions.VIEW_APPOINTMENTS, Permissions.VIEW_OWN_APPOINTMENTS)
        with pytest.raises(HTTPException) as exc_info:
            ctx.require_any(Permissions.VIEW_HR, Permissions.VIEW_REPORTS)
        assert exc_info.value.status_code == 403

    def test_permissions_are_resolved_once(self, location_registry):
        calls = []

        class CountingSource:
            def lookup_role_permissions(self, role_id):
                calls.append(role_id)
                return None

        gate = AccessGate.build(location_registry, CountingSource())
        ctx = PermissionContext(gate, make_principal("STAFF"))
        ctx.can(Permissions.VIEW_SERVICES)
        ctx.can_any(Permissions.VIEW_STAFF)
        ctx.first_accessible_page()
        assert calls == ["STAFF"]

    def test_source_failure_is_service_unavailable(self, location_registry):
        gate = AccessGate.build(location_registry, BrokenRoleSource())
        ctx = PermissionContext(gate, make_principal("STAFF"))
        with pytest.raises(HTTPException) as exc_info:
            ctx.can(Permissions.VIEW_SERVICES)
        assert exc_info.value.status_code == 503

    def test_require_selectable(self, gate):
        ctx = PermissionContext(gate, make_principal("MANAGER", ["loc1"]))
        ctx.require_selectable(LOC1)
        with pytest.raises(HTTPException) as exc_info:
            ctx.require_selectable(HOME)
        assert exc_info.value.status_code == 403

    def test_require_staff_record_access(self, gate):
        ctx = PermissionContext(gate, make_principal("STAFF", principal_id="me"))
        ctx.require_staff_record_access("me")
        with pytest.raises(HTTPException) as exc_info:
            ctx.require_staff_record_access("someone-else")
        assert exc_info.value.status_code == 403

    def test_grant_is_canonical(self, gate):
        ctx = PermissionContext(gate, make_principal("STAFF", ["loc1", "gone", "home"]))
        assert ctx.grant.to_wire() == ["loc1"]


class TestNavigation:
    def test_admin_lands_on_dashboard(self):
        wildcard = PermissionSet.of(Permissions.ALL)
        assert first_accessible_page(wildcard) == "/dashboard"
        assert "/client-portal" in accessible_routes(wildcard)

    def test_staff_lands_on_appointments(self):
        staff = PermissionSet.of(Permissions.VIEW_OWN_APPOINTMENTS)
        assert first_accessible_page(staff) == "/dashboard/appointments"
        assert can_access_route(staff, "/dashboard/appointments/")

    def test_online_store_receptionist_lands_on_pos(self, gate):
        principal = make_principal("STAFF", job_role="online_store_receptionist")
        ctx = PermissionContext(gate, principal)
        assert ctx.first_accessible_page() == "/dashboard/pos"
        assert not ctx.can_access_route("/dashboard/appointments")

    def test_unknown_routes_are_allowed(self):
        assert can_access_route(PermissionSet(), "/dashboard/whats-new")

    def test_empty_permissions_fall_back(self):
        assert first_accessible_page(PermissionSet()) == FALLBACK_LANDING_PAGE
        assert accessible_routes(PermissionSet()) == []

    def test_any_of_semantics(self):
        gift_only = PermissionSet.of(Permissions.VIEW_MEMBERSHIPS)
        assert can_access_route(gift_only, "/dashboard/gift-cards-memberships")
        assert not can_access_route(gift_only, "/dashboard/pos")
