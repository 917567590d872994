import logging
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.routers import analytics, visits
from common.storage import DatabaseVisitStore, InMemoryVisitStore, StoreError, VisitStore

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Service health state
service_state: Dict[str, Any] = {
    "database": False,
    "startup_complete": False,
}


async def create_store() -> VisitStore:
    """Create the configured visit store, falling back to memory."""
    if settings.STORE_BACKEND != "database":
        return InMemoryVisitStore()

    store = DatabaseVisitStore.from_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    try:
        await store.create_tables()
    except Exception as e:
        logger.warning(f"Database connection failed: {e}")
        await store.close()
        return InMemoryVisitStore()

    service_state["database"] = True
    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    logger.info("=" * 50)
    logger.info("Visit Tracker Service Starting...")
    logger.info("=" * 50)

    app.state.store = await create_store()
    if service_state["database"]:
        logger.info("  Visit store: Database")
    else:
        logger.warning("  Visit store: In-memory (demo mode, data is not persisted)")

    service_state["startup_complete"] = True
    logger.info(f"  CORS Origins: {settings.CORS_ORIGINS}")
    logger.info("=" * 50)
    logger.info("Visit Service Ready")
    logger.info("=" * 50)

    yield

    logger.info("Visit service shutting down...")
    await app.state.store.close()
    service_state["database"] = False
    service_state["startup_complete"] = False


app = FastAPI(
    title=settings.APP_NAME,
    description="Personal medical visit tracking and analytics",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(visits.router)
app.include_router(analytics.router)


@app.get("/health")
async def health_check():
    """Basic health check for load balancers."""
    return {"status": "healthy", "service": "visit"}


@app.get("/ready")
async def readiness_check():
    """Detailed readiness check."""
    return {
        "status": "ready" if service_state["startup_complete"] else "starting",
        "services": {
            "database": service_state["database"],
        },
        "demo_mode": not service_state["database"],
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Visit Tracker Service",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    logger.error(f"Visit store failure: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "Storage unavailable",
            "message": "Visit data could not be saved or loaded. Please try again later.",
            "detail": str(exc) if settings.DEBUG else None,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred.",
            "detail": str(exc) if settings.DEBUG else None,
        },
    )
