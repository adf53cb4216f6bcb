"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rest_api.core import configure_cors, lifespan, register_middlewares
from rest_api.routers import router as api_router
from shared.config.logging import rest_api_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.utils.schemas import HealthOutput

API_VERSION = "0.1.0"


app = FastAPI(
    title="Salon Ops REST API",
    description="Multi-location salon back office: permissions and location visibility",
    version=API_VERSION,
    lifespan=lifespan,
)

configure_cors(app)
register_middlewares(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health", response_model=HealthOutput)
def health_check(db: Session = Depends(get_db)):
    """
    Health check that verifies database connectivity.
    Returns 503 with status "degraded" when the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check database failure", error=str(e))
        body = HealthOutput(status="degraded", database="error", version=API_VERSION)
        return JSONResponse(content=body.model_dump(), status_code=503)

    return HealthOutput(status="ok", database="ok", version=API_VERSION)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(api_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rest_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
