"""
Tests for the permission registry and effective permission resolution.
"""

import pytest

from shared.config.constants import JobRoles, Permissions, Role
from rest_api.services.permissions import (
    DEFAULT_REGISTRY,
    InMemoryCustomRoleSource,
    PermissionRegistry,
    PermissionResolver,
    PermissionSet,
    PermissionSourceError,
)
from rest_api.services.permissions.registry import (
    LOCATION_MANAGER_PERMISSIONS,
    ONLINE_STORE_RECEPTIONIST_PERMISSIONS,
    RECEPTIONIST_PERMISSIONS,
    STAFF_PERMISSIONS,
)
from tests.conftest import make_principal


class FailingRoleSource:
    def lookup_role_permissions(self, role_id):
        raise ConnectionError("custom roles store unreachable")


class TestPermissionRegistry:
    def test_admin_roles_are_wildcard(self):
        assert DEFAULT_REGISTRY.permissions_for_role(Role.ADMIN).is_wildcard
        assert DEFAULT_REGISTRY.permissions_for_role("super_admin").is_wildcard

    def test_client_and_unknown_roles_are_absent(self):
        assert DEFAULT_REGISTRY.permissions_for_role(Role.CLIENT) is None
        assert DEFAULT_REGISTRY.permissions_for_role("JANITOR") is None

    def test_job_role_lookup_is_normalized(self):
        assert DEFAULT_REGISTRY.permissions_for_job_role(" Location-Manager ") == (
            LOCATION_MANAGER_PERMISSIONS
        )
        assert DEFAULT_REGISTRY.permissions_for_job_role("stylist") is None
        assert DEFAULT_REGISTRY.permissions_for_job_role(None) is None

    def test_manager_has_no_dashboard(self):
        manager = DEFAULT_REGISTRY.permissions_for_role(Role.MANAGER)
        assert not manager.allows(Permissions.VIEW_DASHBOARD)
        assert manager.allows(Permissions.VIEW_APPOINTMENTS)

    def test_with_job_role_returns_new_snapshot(self):
        registry = PermissionRegistry.default("2025.1")
        extended = registry.with_job_role("Front Desk", [Permissions.VIEW_APPOINTMENTS])

        assert extended.revision == registry.revision + 1
        assert extended.label == "2025.1-r1"
        assert extended.permissions_for_job_role("front_desk").allows(Permissions.VIEW_APPOINTMENTS)
        assert registry.permissions_for_job_role("front_desk") is None

    def test_with_job_role_rejects_blank(self):
        with pytest.raises(ValueError):
            DEFAULT_REGISTRY.with_job_role("  ", [Permissions.VIEW_APPOINTMENTS])

    def test_without_job_role(self):
        reduced = DEFAULT_REGISTRY.without_job_role(JobRoles.RECEPTIONIST)
        assert reduced.permissions_for_job_role(JobRoles.RECEPTIONIST) is None
        assert reduced.revision == DEFAULT_REGISTRY.revision + 1
        assert DEFAULT_REGISTRY.without_job_role("nonexistent") is DEFAULT_REGISTRY

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY.job_role_permissions["hacker"] = PermissionSet.of("all")


class TestPermissionResolver:
    def test_admin_is_wildcard_regardless_of_job_role(self):
        resolver = PermissionResolver()
        admin = make_principal("ADMIN", job_role="online_store_receptionist")
        assert resolver.resolve(admin).is_wildcard
        assert resolver.has_permission(admin, "anything_at_all")

    def test_job_role_takes_precedence_over_role(self):
        resolver = PermissionResolver()
        staff = make_principal("STAFF", job_role="receptionist")
        assert resolver.resolve(staff) == RECEPTIONIST_PERMISSIONS
        assert resolver.has_permission(staff, Permissions.VIEW_APPOINTMENTS)

    def test_job_role_beats_override(self):
        source = InMemoryCustomRoleSource({"STAFF": [Permissions.VIEW_REPORTS]})
        resolver = PermissionResolver(override_source=source)
        staff = make_principal("STAFF", job_role="online_store_receptionist")
        assert resolver.resolve(staff) == ONLINE_STORE_RECEPTIONIST_PERMISSIONS

    def test_unknown_job_role_falls_back_to_role(self):
        resolver = PermissionResolver()
        stylist = make_principal("STAFF", job_role="stylist")
        assert resolver.resolve(stylist) == STAFF_PERMISSIONS

    def test_override_replaces_role_table(self):
        source = InMemoryCustomRoleSource({"staff": [Permissions.VIEW_STAFF]})
        resolver = PermissionResolver(override_source=source)
        staff = make_principal("STAFF")

        assert resolver.resolve(staff) == PermissionSet.of(Permissions.VIEW_STAFF)
        assert not resolver.has_permission(staff, Permissions.VIEW_OWN_APPOINTMENTS)

    def test_empty_override_is_ignored(self):
        source = InMemoryCustomRoleSource({"STAFF": []})
        resolver = PermissionResolver(override_source=source)
        assert resolver.resolve(make_principal("STAFF")) == STAFF_PERMISSIONS

    def test_client_resolves_to_empty(self):
        resolver = PermissionResolver()
        client = make_principal("CLIENT")
        assert resolver.resolve(client).is_empty
        assert not resolver.has_any_permission(client, [Permissions.VIEW_SERVICES])

    def test_client_can_be_granted_by_override(self):
        source = InMemoryCustomRoleSource({"CLIENT": [Permissions.VIEW_CLIENT_PORTAL]})
        resolver = PermissionResolver(override_source=source)
        assert resolver.has_permission(make_principal("CLIENT"), Permissions.VIEW_CLIENT_PORTAL)

    def test_has_any_permission(self):
        resolver = PermissionResolver()
        staff = make_principal("STAFF")
        assert resolver.has_any_permission(
            staff, [Permissions.VIEW_APPOINTMENTS, Permissions.VIEW_OWN_APPOINTMENTS]
        )
        assert not resolver.has_any_permission(staff, [Permissions.MANAGE_ROLES])
        assert not resolver.has_any_permission(staff, [])

    def test_override_source_failure_propagates(self):
        resolver = PermissionResolver(override_source=FailingRoleSource())
        with pytest.raises(PermissionSourceError) as exc_info:
            resolver.resolve(make_principal("STAFF"))
        assert exc_info.value.role_id == "STAFF"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_override_source_not_consulted_for_admin_or_known_job_role(self):
        resolver = PermissionResolver(override_source=FailingRoleSource())
        assert resolver.resolve(make_principal("ADMIN")).is_wildcard
        assert resolver.resolve(make_principal("STAFF", job_role="receptionist")) == (
            RECEPTIONIST_PERMISSIONS
        )

    def test_explicit_registry_snapshot(self):
        registry = DEFAULT_REGISTRY.with_job_role("colorist", [Permissions.VIEW_INVENTORY])
        resolver = PermissionResolver(registry)
        colorist = make_principal("STAFF", job_role="colorist")

        assert resolver.resolve(colorist) == PermissionSet.of(Permissions.VIEW_INVENTORY)
        assert PermissionResolver().resolve(colorist) == STAFF_PERMISSIONS

    def test_unknown_role_string_is_rejected_at_principal(self):
        with pytest.raises(ValueError):
            make_principal("JANITOR")
