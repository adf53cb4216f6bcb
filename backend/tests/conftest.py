"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["TRUST_PRINCIPAL_HEADERS"] = "true"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rest_api.main import app
from rest_api.models import (
    Appointment,
    Base,
    CustomRole,
    Location,
    Service,
    ServiceLocation,
    StaffLocation,
    StaffMember,
)
from rest_api.repositories import DbLocationRegistry
from rest_api.routers._common import get_location_registry
from rest_api.services.permissions import (
    HOME,
    AccessGate,
    CachedLocationRegistry,
    InMemoryLocationRegistry,
    LocationRef,
    Principal,
    LocationGrant,
)
from rest_api.services.permissions import models as domain
from shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


LOC1 = LocationRef.physical("loc1")
LOC2 = LocationRef.physical("loc2")
LOC3 = LocationRef.physical("loc3")


# =============================================================================
# Domain fixtures (no database)
# =============================================================================


def make_principal(role="STAFF", locations=(), job_role=None, principal_id="p-1") -> Principal:
    return Principal(
        id=principal_id,
        role=role,
        job_role=job_role,
        location_grant=LocationGrant.parse(locations),
    )


@pytest.fixture
def location_registry():
    return InMemoryLocationRegistry(["loc1", "loc2", "loc3"])


@pytest.fixture
def gate(location_registry):
    return AccessGate.build(location_registry)


@pytest.fixture
def home_stylist():
    """Works at loc1 and offers home service."""
    return domain.StaffMember(
        id="sty-home",
        name="Sam Shears",
        locations=frozenset({LOC1}),
        offers_home_service=True,
    )


@pytest.fixture
def branch_stylist():
    """Works at loc2 only."""
    return domain.StaffMember(id="sty-branch", name="Bea Bangs", locations=frozenset({LOC2}))


@pytest.fixture
def appointments(home_stylist, branch_stylist):
    """
    a1: home stylist at loc1
    a2: home stylist at home
    a3: branch stylist at loc2
    a4: unassigned home appointment
    """
    return [
        domain.Appointment(id="a1", location=LOC1, staff=home_stylist),
        domain.Appointment(id="a2", location=HOME, staff=home_stylist),
        domain.Appointment(id="a3", location=LOC2, staff=branch_stylist),
        domain.Appointment(id="a4", location=HOME),
    ]


# =============================================================================
# Database and HTTP fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cached_locations(db_session):
    """Location registry over the test database, with a fresh cache per test."""
    return CachedLocationRegistry(DbLocationRegistry(TestingSessionLocal), ttl_seconds=300)


@pytest.fixture(scope="function")
def client(db_session, cached_locations):
    """
    Create a test client with database and location registry overrides.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_location_registry] = lambda: cached_locations

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def principal_headers(role, locations=(), job_role=None, principal_id="p-1") -> dict[str, str]:
    """Headers an authenticating gateway would forward for a principal."""
    headers = {
        "X-Principal-Id": principal_id,
        "X-Principal-Role": role,
        "X-Principal-Locations": ",".join(locations),
    }
    if job_role:
        headers["X-Principal-Job-Role"] = job_role
    return headers


@pytest.fixture
def admin_headers():
    return principal_headers("ADMIN", ["all"], principal_id="owner")


@pytest.fixture
def manager_headers():
    return principal_headers("MANAGER", ["loc1"], principal_id="mgr-1")


@pytest.fixture
def seed_salon(db_session):
    """
    Three branches, a home-service stylist at loc1, a loc2 stylist, a loc1
    receptionist, services and appointments across branches and home.
    """
    db_session.add_all([
        Location(id="loc1", name="Downtown", city="Springfield"),
        Location(id="loc2", name="Riverside", city="Springfield"),
        Location(id="loc3", name="Northgate", city="Shelbyville"),
    ])
    db_session.add_all([
        StaffMember(
            id="sty-home",
            name="Sam Shears",
            role="STAFF",
            job_role="stylist",
            home_service=True,
            assignments=[StaffLocation(location_tag="loc1")],
        ),
        StaffMember(
            id="sty-branch",
            name="Bea Bangs",
            role="STAFF",
            job_role="stylist",
            assignments=[StaffLocation(location_tag="loc2")],
        ),
        StaffMember(
            id="rec-1",
            name="Rita Desk",
            role="STAFF",
            job_role="receptionist",
            assignments=[StaffLocation(location_tag="loc1")],
        ),
    ])
    db_session.add_all([
        Service(
            id="svc-cut",
            name="Haircut",
            offerings=[ServiceLocation(location_tag=t) for t in ("loc1", "loc2", "home")],
        ),
        Service(
            id="svc-gift",
            name="Gift Card",
            offerings=[ServiceLocation(location_tag="online")],
        ),
        Service(
            id="svc-color",
            name="Full Color",
            offerings=[ServiceLocation(location_tag="loc3")],
        ),
    ])
    db_session.add_all([
        Appointment(id="a1", location_tag="loc1", staff_id="sty-home", client_name="Ana"),
        Appointment(id="a2", location_tag="home", staff_id="sty-home", client_name="Eli"),
        Appointment(id="a3", location_tag="loc2", staff_id="sty-branch", client_name="Cleo"),
    ])
    db_session.commit()


@pytest.fixture
def seed_custom_role(db_session):
    role = CustomRole(role_id="staff", name="Extended staff", permissions=["view_staff"])
    db_session.add(role)
    db_session.commit()
    return role
