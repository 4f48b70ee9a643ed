"""
School Directory API

Main FastAPI application for the school directory: classes, students and
enrollments with role-scoped access.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import StoreUnavailable, get_db_context, init_db
from directory import UnknownPrincipalError
from database.seed import seed_defaults
from api import classes_router, students_router, teachers_router, principals_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# --------------- Lifespan ---------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler – initialise DB and bootstrap accounts on startup."""
    logger.info("Initializing database...")
    init_db()
    if settings.seed_on_startup:
        with get_db_context() as db:
            seed_defaults(db)
    logger.info("Database initialized.")
    yield


# --------------- FastAPI app ---------------

app = FastAPI(
    title="School Directory API",
    description="""
API for managing classes, students and enrollments.

### Authorization Rules
- **Teachers**: Create classes, edit and delete only the classes they own,
  manage student profiles, remove students from their classes
- **Students**: Browse all classes, enroll and unenroll themselves,
  view only their own profile

Every request names its requester with the `requester_id` query parameter;
the role is always looked up in the database.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(UnknownPrincipalError)
async def unknown_principal_handler(request: Request, exc: UnknownPrincipalError):
    """The requester does not exist in the directory."""
    return JSONResponse(
        status_code=401,
        content={"detail": "Unknown requester", "type": type(exc).__name__}
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    """The database could not serve the request; the client may retry."""
    return JSONResponse(
        status_code=503,
        content={"detail": exc.message, "type": type(exc).__name__}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


# Include routers
app.include_router(classes_router)
app.include_router(students_router)
app.include_router(teachers_router)
app.include_router(principals_router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API health check."""
    return {
        "status": "online",
        "service": "School Directory API",
        "version": "1.0.0"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
