# parking_gate/main.py
"""
FastAPI application entry point.
Includes security middleware, domain + global error handlers, all routers,
the reactive rules and the scheduled jobs.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from parking_gate.routers import gate, spots, tickets, barriers, system, health
from parking_gate.database import create_tables
from parking_gate.config import settings
from sqlalchemy.exc import SQLAlchemyError
from parking_gate.errors import GateError, Internal
from parking_gate.security import host_in_networks
from parking_gate.services.change_feed import change_feed
from parking_gate.services.event_dispatcher import register_reactions
from parking_gate.services.scheduler import start_scheduled_jobs
from parking_gate.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parking Gate Coordinator API",
    description="Two-factor entry/exit barrier protocol with spot/ticket reconciliation.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

HARDWARE_PREFIX = "/api/v1/hardware/"
OPERATOR_PREFIXES = ("/api/v1/admin/", "/api/v1/barriers/")

_background_tasks = []

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Hardware Network Middleware ──────────────────────────────────────────────
class HardwareNetworkMiddleware(BaseHTTPMiddleware):
    """
    Gate buttons and spot sensors carry no credentials. Their endpoints only
    answer callers inside HARDWARE_ALLOWED_NETWORKS. Leave it empty to disable.
    """
    async def dispatch(self, request: Request, call_next):
        networks = settings.HARDWARE_NETWORKS
        if not request.url.path.startswith(HARDWARE_PREFIX) or not networks:
            return await call_next(request)

        host = request.client.host if request.client else None
        if not host_in_networks(host, networks):
            logger.warning(f"Hardware endpoint {request.url.path} refused for {host}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"detail": "Hardware endpoints are restricted to the gate network"},
            )
        return await call_next(request)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional API key for operator endpoints (seeding, manual barrier override).
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        is_operator = request.url.path.startswith(OPERATOR_PREFIXES) and request.method != "GET"
        if not is_operator or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


app.add_middleware(HardwareNetworkMiddleware)
if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Domain Error Handler ─────────────────────────────────────────────────────
@app.exception_handler(GateError)
async def gate_error_handler(request: Request, exc: GateError):
    if exc.http_status >= 500:
        logger.error(f"Internal error on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status,
                            content={"detail": "Internal server error", "code": exc.code})
    return JSONResponse(status_code=exc.http_status, content={"detail": exc.message, "code": exc.code})


# ── Store Error Handler ──────────────────────────────────────────────────────
@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Store error on {request.url.path}: {exc}", exc_info=True)
    error = Internal()
    return JSONResponse(status_code=error.http_status, content={"detail": error.message, "code": error.code})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "code": "internal"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(gate.router,     prefix="/api/v1", tags=["Entry / Exit"])
app.include_router(spots.router,    prefix="/api/v1", tags=["Spots"])
app.include_router(tickets.router,  prefix="/api/v1", tags=["Tickets"])
app.include_router(barriers.router, prefix="/api/v1", tags=["Barriers"])
app.include_router(system.router,   prefix="/api/v1", tags=["System"])
app.include_router(health.router,   prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Parking gate backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    register_reactions(change_feed)
    _background_tasks.extend(start_scheduled_jobs())
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Parking gate backend shutting down...")
    for task in _background_tasks:
        task.cancel()
    # Let in-flight reactions (e.g. a pending barrier auto-close) finish
    await change_feed.drain()
