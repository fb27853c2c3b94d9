"""
School Administration API

Main FastAPI application for academic years, courses, students, users
and student grades, with JWT authentication and admin/teacher roles.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from api import (
    auth_router,
    academic_years_router,
    students_router,
    courses_router,
    users_router,
    grades_router,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("school_admin")


# --------------- Lifespan ---------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler – initialise DB on startup."""
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized.")
    yield


# --------------- FastAPI app ---------------

app = FastAPI(
    title="School Administration API",
    description="""
API for managing academic years, courses, students, users and grades.

## Authentication
- `POST /auth/login` returns a bearer token; send it as `Authorization: Bearer <token>`

## Authorization Rules
- **Admins**: Manage academic years, courses, students and users; grade any course
- **Teachers**: Read school records, list users, enter grades for the courses they teach

## Grades
- `PUT /grades/` accepts a partial update (one or more trimesters and/or the final exam)
- Trimester averages, the annual average and the promotion score (90% trimesters,
  10% final exam) are recomputed on every write
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


# Include routers
app.include_router(auth_router)
app.include_router(academic_years_router)
app.include_router(students_router)
app.include_router(courses_router)
app.include_router(users_router)
app.include_router(grades_router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API health check."""
    return {
        "status": "online",
        "service": "School Administration API",
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
