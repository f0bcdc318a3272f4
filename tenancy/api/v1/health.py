#!/usr/bin/env python3
import logging
from datetime import datetime, timezone
from fastapi import APIRouter
import redis.asyncio as aioredis
from sqlalchemy import select, func

from tenancy.schemas.health import HealthCheckResponse, ConnectionStatus, TenancyCounts
from tenancy.core.database import check_db_connection, AsyncSessionLocal
from tenancy.core.config import settings
from tenancy.models.membership import Membership
from tenancy.models.organization import Organization

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def check_redis_connection() -> bool:
    """Check if Redis connection is healthy."""
    client = aioredis.from_url(settings.redis_url, socket_connect_timeout=2)
    try:
        await client.ping()
        return True
    except Exception as e:
        logger.error(f"Redis connection check failed: {e}")
        return False
    finally:
        await client.aclose()


async def count_tenancy_rows() -> TenancyCounts:
    async with AsyncSessionLocal() as db:
        organizations = await db.scalar(select(func.count(Organization.id)))
        memberships = await db.scalar(select(func.count(Membership.id)))
    return TenancyCounts(organizations=organizations, memberships=memberships)


@router.get("/healthcheck", response_model=HealthCheckResponse)
async def healthcheck() -> HealthCheckResponse:
    """
    Health check endpoint.

    Redis is only probed when it backs the session pointer.
    """
    database = ConnectionStatus.DISCONNECTED
    counts = None
    if await check_db_connection():
        database = ConnectionStatus.CONNECTED
        try:
            counts = await count_tenancy_rows()
        except Exception as e:
            logger.error(f"Tenancy row count failed: {e}")

    redis_status = ConnectionStatus.NOT_USED
    if settings.pointer_backend == "redis":
        redis_status = (
            ConnectionStatus.CONNECTED if await check_redis_connection()
            else ConnectionStatus.DISCONNECTED
        )

    return HealthCheckResponse.evaluate(
        database=database,
        redis=redis_status,
        pointer_backend=settings.pointer_backend,
        counts=counts,
        timestamp=datetime.now(timezone.utc),
    )
