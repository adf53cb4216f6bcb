"""
Tests for location endpoints and the location switcher.
"""

from tests.conftest import principal_headers


class TestListLocations:
    def test_requires_principal(self, client, seed_salon):
        response = client.get("/api/locations")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_admin_sees_all_branches(self, client, seed_salon, admin_headers):
        response = client.get("/api/locations", headers=admin_headers)
        assert response.status_code == 200
        assert [loc["id"] for loc in response.json()] == ["loc1", "loc3", "loc2"]

    def test_admin_can_include_virtual_lenses(self, client, seed_salon, admin_headers):
        response = client.get("/api/locations?include_virtual=true", headers=admin_headers)
        data = response.json()
        assert [loc["kind"] for loc in data[-2:]] == ["home", "online"]

    def test_manager_sees_granted_branch_only(self, client, seed_salon, manager_headers):
        response = client.get("/api/locations?include_virtual=true", headers=manager_headers)
        assert [loc["id"] for loc in response.json()] == ["loc1"]


class TestLocationMutations:
    def test_create_requires_manage_locations(self, client, seed_salon, manager_headers):
        response = client.post(
            "/api/locations",
            json={"id": "loc4", "name": "Uptown"},
            headers=manager_headers,
        )
        assert response.status_code == 403

    def test_create_rejects_reserved_id(self, client, seed_salon, admin_headers):
        response = client.post(
            "/api/locations",
            json={"id": "Home", "name": "Not allowed"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_create_conflict(self, client, seed_salon, admin_headers):
        response = client.post(
            "/api/locations",
            json={"id": "loc1", "name": "Duplicate"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_new_location_is_selectable_at_once(self, client, seed_salon, admin_headers):
        manager = principal_headers("MANAGER", ["loc1", "loc4"])
        before = client.get("/api/me/locations", headers=manager).json()
        assert before["grant"] == ["loc1"]

        response = client.post(
            "/api/locations",
            json={"id": "loc4", "name": "Uptown", "city": "Springfield"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["id"] == "loc4"

        after = client.get("/api/me/locations", headers=manager).json()
        assert after["grant"] == ["loc1", "loc4"]
        assert [o["id"] for o in after["options"]] == ["loc1", "loc4"]

    def test_deleted_location_leaves_grants_at_once(self, client, seed_salon, admin_headers):
        manager = principal_headers("MANAGER", ["loc1", "loc2"])
        assert client.get("/api/me/locations", headers=manager).json()["grant"] == ["loc1", "loc2"]

        response = client.delete("/api/locations/loc2", headers=admin_headers)
        assert response.status_code == 204

        after = client.get("/api/me/locations", headers=manager).json()
        assert after["grant"] == ["loc1"]
        staff = client.get("/api/staff?location=loc2", headers=admin_headers)
        assert staff.json() == []

    def test_delete_unknown_location(self, client, seed_salon, admin_headers):
        response = client.delete("/api/locations/nowhere", headers=admin_headers)
        assert response.status_code == 404


class TestLocationSwitcher:
    def test_admin_options(self, client, seed_salon, admin_headers):
        data = client.get("/api/me/locations", headers=admin_headers).json()
        assert [o["id"] for o in data["options"]] == ["all", "loc1", "loc2", "loc3", "home", "online"]
        assert data["default"] == "all"
        assert data["options"][1]["name"] == "Downtown"

    def test_stale_only_grant_has_no_default(self, client, seed_salon):
        headers = principal_headers("STAFF", ["closed"])
        data = client.get("/api/me/locations", headers=headers).json()
        assert data == {"options": [], "default": None, "grant": []}

    def test_select_granted_branch(self, client, seed_salon, manager_headers):
        response = client.post("/api/me/location", json={"location": "loc1"}, headers=manager_headers)
        assert response.status_code == 200
        assert response.json() == {"location": "loc1", "kind": "physical"}

    def test_non_admin_cannot_select_reserved_lens(self, client, seed_salon):
        headers = principal_headers("MANAGER", ["all"])
        for location in ("all", "home", "online"):
            response = client.post("/api/me/location", json={"location": location}, headers=headers)
            assert response.status_code == 403

    def test_non_admin_cannot_select_other_branch(self, client, seed_salon, manager_headers):
        response = client.post("/api/me/location", json={"location": "loc2"}, headers=manager_headers)
        assert response.status_code == 403

    def test_admin_selects_home(self, client, seed_salon, admin_headers):
        response = client.post("/api/me/location", json={"location": "HOME"}, headers=admin_headers)
        assert response.json() == {"location": "home", "kind": "home"}
