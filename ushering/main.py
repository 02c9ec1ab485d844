import logging

import ushering.models  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ushering.core.config import settings
from ushering.core.errors import ServiceError
from ushering.core.logging import configure_logging
from ushering.routers import churches as churches_router
from ushering.routers import events as events_router
from ushering.routers import masses as masses_router
from ushering.routers import ushers as ushers_router
from ushering.routers import zones as zones_router

app = FastAPI(title="Ushering Scheduler API", version="0.1.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(churches_router.router)
app.include_router(ushers_router.router)
app.include_router(events_router.router)
app.include_router(masses_router.router)
app.include_router(zones_router.router)
app.include_router(zones_router.positions_router)


@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("service_error", extra={"path": request.url.path, "type": exc.type.value, "details": exc.details})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.type.value},
    )


@app.on_event("startup")
def setup_logging() -> None:
    configure_logging(settings.LOG_LEVEL)
    logger.info("ushering api started", extra={"environment": settings.ENVIRONMENT})


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}
