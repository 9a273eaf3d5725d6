from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from streakzz.config import settings
from streakzz.logging_setup import configure_logging
from streakzz.jobs.cleanup_participants import run_cleanup
from streakzz.services.scheduler import CleanupScheduler
from streakzz.routes.system import router as system_router
from streakzz.routes.auth import router as auth_router
from streakzz.routes.projects import router as projects_router
from streakzz.routes.users import router as users_router
from streakzz.routes.admin import router as admin_router
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha)
    scheduler: CleanupScheduler = app.state.cleanup_scheduler
    if settings.cleanup_scheduler_enabled:
        scheduler.start()
    yield
    # Shutdown
    scheduler.stop()
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API for daily project streaks",
)

# One cleanup scheduler per process; admin routes reach it through app.state
app.state.cleanup_scheduler = CleanupScheduler(
    run_cleanup,
    default_expression=settings.cleanup_cron,
    timezone=settings.cleanup_timezone,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system_router)
app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(users_router)
app.include_router(admin_router)

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    try:
        response: Response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()
    response.headers["X-Request-ID"] = rid
    return response
