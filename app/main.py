"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers page routes (auth, onboarding, gated pages)
- Issues the visitor cookie
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.services.visitor_service import VisitorService, close_visitor_service, get_visitor_service
from app.api import auth, pages

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting Employ.me gateway...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Backend: {settings.API_BASE_URL}")
        logger.info(f"Debug Mode: {settings.DEBUG}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    # Shutdown
    logger.info("🛑 Shutting down Employ.me gateway...")

    try:
        await close_visitor_service()
        logger.info("✅ Visitor sessions closed")
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


# Create FastAPI app with lifespan
app = FastAPI(
    title="Employ.me Gateway",
    description="Session, route guard and onboarding gate in front of the Employ.me API",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Visitor cookie middleware
@app.middleware("http")
async def issue_visitor_cookie(request: Request, call_next):
    """(Re)issues the cookie when the request was served to a new visitor."""
    response = await call_next(request)

    visitor = getattr(request.state, "visitor", None)
    if visitor and request.cookies.get(settings.VISITOR_COOKIE_NAME) != visitor.visitor_id:
        response.set_cookie(
            key=settings.VISITOR_COOKIE_NAME,
            value=visitor.visitor_id,
            max_age=settings.SESSION_TIMEOUT_MINUTES * 60,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
        )

    return response


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log slow requests
    if process_time > 5.0:  # More than 5 seconds
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(auth.router, tags=["Auth"])
app.include_router(pages.router, tags=["Pages"])


# Root endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "Employ.me Gateway",
        "version": "1.0.0",
        "description": "Auth and onboarding gate for the Employ.me job board",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check(service: VisitorService = Depends(get_visitor_service)):
    """
    Health check endpoint.
    The backend is not probed; every page request reaches it anyway.
    """
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {
            "visitors": len(service),
            "backend": "not_checked",
        }
    }


# Readiness probe (for Kubernetes/orchestration)
@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    return {"status": "ready"}


# Liveness probe (for Kubernetes/orchestration)
@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
