#!/usr/bin/env python3
from pydantic import BaseModel
from datetime import datetime
from enum import Enum
from typing import Optional


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    NOT_USED = "not_used"


class HealthStatus(str, Enum):
    """
    ``degraded`` means memberships are served but the Redis pointer backend
    is down, so sessions fall back to their first organization on boot.
    """
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class PointerBackend(str, Enum):
    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"


class TenancyCounts(BaseModel):
    organizations: int
    memberships: int


class HealthCheckResponse(BaseModel):
    status: HealthStatus
    database: ConnectionStatus
    redis: ConnectionStatus
    pointer_backend: PointerBackend
    counts: Optional[TenancyCounts] = None
    timestamp: datetime

    class Config:
        use_enum_values = True

    @classmethod
    def evaluate(
        cls,
        database: ConnectionStatus,
        redis: ConnectionStatus,
        pointer_backend: str,
        counts: Optional[TenancyCounts],
        timestamp: datetime
    ) -> "HealthCheckResponse":
        """Derive the overall status from the component statuses."""
        if database != ConnectionStatus.CONNECTED:
            status = HealthStatus.UNHEALTHY
        elif redis == ConnectionStatus.DISCONNECTED:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY
        return cls(
            status=status,
            database=database,
            redis=redis,
            pointer_backend=pointer_backend,
            counts=counts,
            timestamp=timestamp,
        )
