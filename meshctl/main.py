"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from meshctl.api.v1 import router as v1_router
from meshctl.api.v1.auth import get_ext_client_cleanup
from meshctl.core.config import settings
from meshctl.core.database import session_scope
from meshctl.core.errors import MeshError
from meshctl.services.store import RecordStore
from meshctl.services.superadmin import reconcile_superadmins

logger = logging.getLogger(__name__)


def _reconcile_on_startup() -> None:
    with session_scope() as db:
        try:
            reconcile_superadmins(RecordStore(db))
        except MeshError as e:
            logger.error("Superadmin reconciliation failed at startup: %s", e.message)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    if settings.RECONCILE_ON_STARTUP:
        _reconcile_on_startup()
    yield
    get_ext_client_cleanup().shutdown(wait=True)


app = FastAPI(
    title="meshctl API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MeshError)
async def mesh_error_handler(request: Request, exc: MeshError) -> JSONResponse:
    """Render service errors as {code, kind, message}."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "meshctl API"}
