"""
FastAPI application entry point.
Includes admin-key middleware, global error handlers, and all routers.
"""

import hmac
import time
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import rc, health, metrics
from app.database import create_tables
from app.config import settings
from app.repositories.rc_repository import DuplicateRcNumberError
from app.services.notification_service import email_notifier
from app.services.rc_service import RcNotFoundError
from app.services.rc_validation import RcValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="SmartVehicle RC Registry API",
    description="Vehicle Registration Certificate records, ownership transfers and inspection stats.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (admin / inspection front end) ─────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the front-end origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Admin Key Middleware ─────────────────────────────────────────────────────
ADMIN_HEADER = "X-ADMIN-KEY"
WRITE_METHODS = {"POST", "PUT", "DELETE"}
PROTECTED_PREFIX = "/api/v1/rc"


def is_admin_authorized(request: Request) -> bool:
    """True when X-ADMIN-KEY matches ADMIN_KEY. No configured key means nobody is authorized."""
    supplied = request.headers.get(ADMIN_HEADER)
    if not settings.ADMIN_KEY or not supplied:
        return False
    return hmac.compare_digest(supplied.encode(), settings.ADMIN_KEY.encode())


class AdminKeyMiddleware(BaseHTTPMiddleware):
    """
    Gates RC writes (POST/PUT/DELETE under /api/v1/rc) on the admin key.
    Reads, health and metrics stay open. Rejected requests never reach the service.
    """
    async def dispatch(self, request: Request, call_next):
        is_write = request.method in WRITE_METHODS and request.url.path.startswith(PROTECTED_PREFIX)
        if not is_write or is_admin_authorized(request):
            return await call_next(request)

        logger.warning(f"Rejected {request.method} {request.url.path}: invalid or missing admin key")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or missing admin key"},
        )


app.add_middleware(AdminKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(RcValidationError)
async def validation_exception_handler(request: Request, exc: RcValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(RcNotFoundError)
async def not_found_exception_handler(request: Request, exc: RcNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(DuplicateRcNumberError)
async def duplicate_exception_handler(request: Request, exc: DuplicateRcNumberError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(rc.router,      prefix="/api/v1", tags=["🚗 RC Registry"])
app.include_router(health.router,  prefix="/api/v1", tags=["💚 Health"])
app.include_router(metrics.router, prefix="/api/v1", tags=["📊 Metrics"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 RC Registry backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    if not settings.ADMIN_KEY:
        logger.warning("⚠️  ADMIN_KEY not set — all RC writes will be rejected")
    if not settings.MAIL_HOST:
        logger.info("📭 MAIL_HOST not set — owner notifications are logged only")
    logger.info(f"🔁 Update on unknown id: {'upsert' if settings.RC_UPDATE_UPSERT else '404'}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 RC Registry backend shutting down...")
    email_notifier.shutdown()
