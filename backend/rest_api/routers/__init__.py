"""
API router - combines the domain routers under /api.

- locations: branch listing and management
- staff: staff listing and single records
- appointments: calendar listing with cross-location blocks
- services: service catalog
- me: the current principal's permissions, locations and navigation
"""

from fastapi import APIRouter

from .locations import router as locations_router
from .staff import router as staff_router
from .appointments import router as appointments_router
from .services import router as services_router
from .me import router as me_router


router = APIRouter(prefix="/api")

router.include_router(locations_router)
router.include_router(staff_router)
router.include_router(appointments_router)
router.include_router(services_router)
router.include_router(me_router)
