"""
Services module for business logic.

- permissions/: location-scoped role-based access control and visibility
  filtering (framework-free core plus the per-request PermissionContext)

Usage:
    from rest_api.services.permissions import AccessGate, Principal
"""
