"""
CampusHire - Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import structlog

from campushire.core.config import settings
from campushire.core.database import init_db
from campushire.core.logging_config import configure_logging
from campushire.core.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ExceptionHandlerMiddleware,
    error_response,
)
from campushire.core.exceptions import CampusHireException
from campushire.auth.router import router as auth_router
from campushire.students.router import router as students_router
from campushire.openings.router import router as openings_router
from campushire.windows.router import router as windows_router
from campushire.eligibility.router import router as eligibility_router
from campushire.applications.router import router as applications_router
from campushire.rounds.router import router as rounds_router
from campushire.reviews.router import router as reviews_router
from campushire.notifications.router import router as notifications_router

# Configure logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("application_starting", version=settings.APP_VERSION)
    try:
        init_db()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
    yield
    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Campus recruitment pipeline and eligibility engine",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Add middleware
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CampusHireException)
async def campushire_exception_handler(request: Request, exc: CampusHireException):
    """Handle CampusHire exceptions"""
    return error_response(exc)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


# Include routers
app.include_router(auth_router)
app.include_router(students_router)
app.include_router(openings_router)
app.include_router(windows_router)
app.include_router(eligibility_router)
app.include_router(applications_router)
app.include_router(rounds_router)
app.include_router(reviews_router)
app.include_router(notifications_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "campushire.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
