"""StayKasa — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staykasa.api.errors import register_exception_handlers
from staykasa.api.v1.admin import router as admin_router
from staykasa.api.v1.auth import router as auth_router
from staykasa.api.v1.bookings import router as bookings_router
from staykasa.api.v1.host import router as host_router
from staykasa.api.v1.notifications import router as notifications_router
from staykasa.api.v1.properties import router as properties_router
from staykasa.config import settings

# Configure root logger so all staykasa.* loggers output to stderr.
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    yield
    # Shutdown: dispose engine connections
    from staykasa.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Booking and availability engine for the StayKasa vacation-rental marketplace.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(properties_router)
app.include_router(bookings_router)
app.include_router(host_router)
app.include_router(admin_router)
app.include_router(notifications_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
