#!/usr/bin/env python3
"""
Tenancy Gateway - FastAPI HTTP Server

Owns organizations and memberships and serves the membership list that
tenant session stores load at boot. All endpoints are documented at /docs.

API Version: v1
Base Path: /api/v1
"""
import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tenancy.api.v1 import organizations, memberships, health
from tenancy.core.config import settings as pydantic_settings
from tenancy.core.database import init_db

# Logging Setup
logging.basicConfig(
    format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    datefmt="%d/%m/%Y %H:%M:%S",
)
logger = logging.getLogger("http_server")
logger.setLevel(logging.DEBUG if pydantic_settings.debug else logging.INFO)


# Filter out healthcheck logs from uvicorn
class EndpointFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return not (record.args and len(record.args) >= 3 and record.args[2] == "/healthcheck")


logging.getLogger("uvicorn.access").addFilter(EndpointFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    try:
        await init_db()
    except Exception as e:
        logger.error(f"Startup database initialization failed: {e}")
    logger.info(
        f"{pydantic_settings.app_name} ready (pointer backend: {pydantic_settings.pointer_backend})"
    )

    yield

    logger.info("Shutdown: tenancy gateway stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application with all v1 routers."""
    application = FastAPI(
        title=pydantic_settings.app_name,
        description=pydantic_settings.app_description,
        version="1.0.0",
        docs_url=pydantic_settings.docs_url,
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS Middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=pydantic_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(organizations.router, prefix=pydantic_settings.api_v1_prefix)
    application.include_router(memberships.router, prefix=pydantic_settings.api_v1_prefix)
    application.include_router(health.router)
    return application


app = create_app()


def start():
    """Start the FastAPI application."""
    logger.info("Starting FastAPI application...")
    uvicorn.run(
        "tenancy.http_server.ingress:app",
        host="0.0.0.0",
        port=pydantic_settings.service_port,
        workers=pydantic_settings.workers
    )


if __name__ == "__main__":
    start()
