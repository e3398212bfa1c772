#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - FastAPI Application
HTTP layer over the habit database and the analytics engine

Version: 1.0.0
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from habitcheck.api import analysis, habits
from habitcheck.api.schemas import HealthCheck
from habitcheck.config import HabitCheckSettings, get_settings
from habitcheck.core.database import create_database
from habitcheck.core.exceptions import DatabaseError, HabitNotFoundError, ValidationError

logger = logging.getLogger(__name__)


def create_app(settings: Optional[HabitCheckSettings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle"""
        logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")
        app.state.database = create_database(settings)
        logger.info(f"📊 Database: {settings.database_path}")
        logger.info("✅ Ready")

        yield

        logger.info(f"🛑 Stopping {settings.APP_NAME}...")
        app.state.database.shutdown()
        logger.info("✅ Resources released")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Habit tracking with completion analytics and suggestions",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.started_at = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Request log line and processing time header"""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response

    # ===== ERROR HANDLERS =====

    @app.exception_handler(HabitNotFoundError)
    async def habit_not_found_handler(request: Request, exc: HabitNotFoundError):
        return JSONResponse(status_code=404, content={"success": False, "message": "Habit not found"})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"success": False, "message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "errors": [
                {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()
            ]}
        )

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        logger.error(f"❌ Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"success": False, "message": "Storage error"})

    # ===== ROUTES =====

    app.include_router(habits.router)
    app.include_router(analysis.router)

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        return HealthCheck(
            status="healthy",
            service=settings.APP_NAME,
            version=settings.VERSION,
            timestamp=time.time()
        )

    return app
