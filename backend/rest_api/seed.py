"""
Seed data for development and demos.
Creates three branches, a small team, a service catalog, a week of
appointments and one custom role override.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from rest_api.models import (
    Appointment,
    CustomRole,
    Location,
    Service,
    ServiceLocation,
    StaffLocation,
    StaffMember,
)
from shared.config.constants import JobRoles, LocationTag, Permissions, role_for_job_role
from shared.config.logging import get_logger

logger = get_logger(__name__)


LOCATIONS = [
    {"id": "loc1", "name": "Downtown", "address": "12 Main St", "city": "Springfield"},
    {"id": "loc2", "name": "Riverside", "address": "480 River Rd", "city": "Springfield"},
    {"id": "loc3", "name": "Northgate", "address": "9 Northgate Mall", "city": "Shelbyville"},
]

# (id, name, job_role, location tags, home service)
STAFF = [
    ("owner", "Olivia Owner", JobRoles.ORG_ADMIN, ["loc1", "loc2", "loc3"], False),
    ("mgr-1", "Marcus Lane", JobRoles.LOCATION_MANAGER, ["loc1"], False),
    ("rec-1", "Rita Desk", JobRoles.RECEPTIONIST, ["loc1"], False),
    ("rec-online", "Oscar Web", JobRoles.ONLINE_STORE_RECEPTIONIST, [LocationTag.ONLINE], False),
    ("sty-1", "Sam Shears", JobRoles.STYLIST, ["loc1", "loc2"], True),
    ("sty-2", "Bea Bangs", JobRoles.STYLIST, ["loc2"], False),
    ("col-1", "Cora Tint", JobRoles.COLORIST, ["loc3"], True),
    ("nail-1", "Nina Polish", JobRoles.NAIL_TECHNICIAN, [LocationTag.HOME], True),
]

# (id, name, category, minutes, price cents, location tags)
SERVICES = [
    ("svc-cut", "Haircut", "hair", 45, 3500, ["loc1", "loc2", "loc3", LocationTag.HOME]),
    ("svc-color", "Full Color", "hair", 120, 9500, ["loc1", "loc3"]),
    ("svc-mani", "Manicure", "nails", 40, 2500, ["loc2", LocationTag.HOME]),
    ("svc-gift", "Gift Card", "retail", 0, 5000, [LocationTag.ONLINE]),
]

# (id, location tag, staff id, client, service, day offset, hour)
APPOINTMENTS = [
    ("apt-1", "loc1", "sty-1", "Ana Perez", "Haircut", 0, 10),
    ("apt-2", "loc2", "sty-1", "Ben Stone", "Haircut", 1, 11),
    ("apt-3", "loc2", "sty-2", "Cleo Ray", "Haircut", 1, 15),
    ("apt-4", "loc3", "col-1", "Dana Holt", "Full Color", 2, 9),
    ("apt-5", LocationTag.HOME, "sty-1", "Eli Fox", "Haircut", 2, 17),
    ("apt-6", LocationTag.HOME, "nail-1", "Faye Moss", "Manicure", 3, 12),
    ("apt-7", LocationTag.HOME, "col-1", "Gus Park", "Haircut", 4, 16),
]

CUSTOM_ROLES = [
    {
        "role_id": "STAFF",
        "name": "Stylist (extended)",
        "permissions": [
            Permissions.VIEW_OWN_APPOINTMENTS,
            Permissions.VIEW_SERVICES,
            Permissions.VIEW_CLIENTS,
            Permissions.VIEW_LOYALTY,
        ],
    },
]


def seed(db: Session) -> None:
    """
    Insert demo data. Idempotent: skips when any location already exists.
    """
    if db.scalar(select(Location.id).limit(1)):
        logger.info("Database already seeded, skipping")
        return

    logger.info("Seeding demo data")

    for data in LOCATIONS:
        db.add(Location(**data))

    for staff_id, name, job_role, tags, home_service in STAFF:
        db.add(
            StaffMember(
                id=staff_id,
                name=name,
                role=role_for_job_role(job_role).value,
                job_role=job_role,
                home_service=home_service,
                assignments=[StaffLocation(location_tag=tag) for tag in tags],
            )
        )

    for service_id, name, category, minutes, price, tags in SERVICES:
        db.add(
            Service(
                id=service_id,
                name=name,
                category=category,
                duration_minutes=minutes,
                price_cents=price,
                offerings=[ServiceLocation(location_tag=tag) for tag in tags],
            )
        )

    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    for apt_id, tag, staff_id, client, service, day, hour in APPOINTMENTS:
        db.add(
            Appointment(
                id=apt_id,
                location_tag=tag,
                staff_id=staff_id,
                client_name=client,
                service_name=service,
                starts_at=today + timedelta(days=day, hours=hour),
            )
        )

    for data in CUSTOM_ROLES:
        db.add(CustomRole(**data))

    db.commit()
    logger.info(
        "Demo data seeded",
        locations=len(LOCATIONS),
        staff=len(STAFF),
        services=len(SERVICES),
        appointments=len(APPOINTMENTS),
    )
