#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - API Dependencies
Providers for the database, the analytics engine, the requesting user and "today"
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from habitcheck.core.analytics import AnalyticsEngine
from habitcheck.core.database import HabitDatabase

logger = logging.getLogger(__name__)

_analytics_engine = AnalyticsEngine()


def get_database(request: Request) -> HabitDatabase:
    """Database created by the application lifespan"""
    database = getattr(request.app.state, "database", None)
    if database is None:
        logger.error("❌ Habit database is not initialized")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not initialized")
    return database


def get_analytics_engine() -> AnalyticsEngine:
    return _analytics_engine


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """The owning user is resolved upstream and passed as an opaque header"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_reference_date() -> date:
    return date.today()


def get_current_time() -> datetime:
    return datetime.now()
