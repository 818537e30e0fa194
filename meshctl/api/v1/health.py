"""Liveness/readiness probe: database reachability and bootstrap state."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from meshctl.core.config import settings
from meshctl.core.database import check_db_connected, get_db
from meshctl.schemas.health import HealthResponse
from meshctl.services.store import RecordStore
from meshctl.services.superadmin import has_superadmin

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    connected = check_db_connected(db)
    return HealthResponse(
        environment=settings.APP_ENV,
        version=settings.SERVER_VERSION,
        database="connected" if connected else "disconnected",
        superadmin_configured=has_superadmin(RecordStore(db)) if connected else None,
    )
