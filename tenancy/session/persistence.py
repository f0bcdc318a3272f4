#!/usr/bin/env python3
"""Storage for the last active organization id (``lastCompanyId``).

A pointer store holds a single integer per session. Values that cannot be
parsed back into an integer read as ``None`` so a corrupted entry degrades
to "no preference" instead of a stale tenant.
"""
import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)

POINTER_KEY = "lastCompanyId"


def _parse_pointer(raw) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and not raw.is_integer():
        logger.warning(f"Ignoring non-integral {POINTER_KEY} value: {raw!r}")
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unparseable {POINTER_KEY} value: {raw!r}")
        return None


class PointerStore(Protocol):
    """Port for persisting the active organization pointer."""

    async def read(self) -> Optional[int]:
        ...

    async def write(self, organization_id: int) -> None:
        ...

    async def clear(self) -> None:
        ...


class InMemoryPointerStore:
    """Pointer held in process memory; survives store rebuilds, not restarts."""

    def __init__(self, initial: Optional[int] = None):
        self._value = initial

    async def read(self) -> Optional[int]:
        return self._value

    async def write(self, organization_id: int) -> None:
        self._value = int(organization_id)

    async def clear(self) -> None:
        self._value = None


class JsonFilePointerStore:
    """Pointer persisted as ``{"lastCompanyId": <int>}`` in a local JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def read(self) -> Optional[int]:
        return await asyncio.to_thread(self._read)

    async def write(self, organization_id: int) -> None:
        await asyncio.to_thread(self._write, int(organization_id))

    async def clear(self) -> None:
        await asyncio.to_thread(self.path.unlink, missing_ok=True)

    def _read(self) -> Optional[int]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read session pointer file {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return _parse_pointer(data.get(POINTER_KEY))

    def _write(self, organization_id: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps({POINTER_KEY: organization_id}), encoding="utf-8")
        tmp_path.replace(self.path)


class RedisPointerStore:
    """Pointer kept in Redis under ``<prefix>:<session_id>``."""

    def __init__(self, redis_client, session_id: Union[str, int], key_prefix: str = "tenancy:last_company"):
        self.redis = redis_client
        self.key = f"{key_prefix}:{session_id}"

    async def read(self) -> Optional[int]:
        return _parse_pointer(await self.redis.get(self.key))

    async def write(self, organization_id: int) -> None:
        await self.redis.set(self.key, str(int(organization_id)))

    async def clear(self) -> None:
        await self.redis.delete(self.key)


def session_pointer_path(base_path: Union[str, Path], session_id: Union[str, int]) -> Path:
    """One file per session next to ``base_path``: ``session.json`` -> ``session.<id>.json``."""
    base = Path(base_path)
    safe_id = re.sub(r"[^A-Za-z0-9_-]", "_", str(session_id))
    return base.with_name(f"{base.stem}.{safe_id}{base.suffix or '.json'}")


def create_pointer_store(session_id: Union[str, int], settings=None) -> PointerStore:
    """Build the pointer store selected by ``settings.pointer_backend``."""
    if settings is None:
        from tenancy.core.config import settings

    backend = settings.pointer_backend
    if backend == "memory":
        return InMemoryPointerStore()
    if backend == "redis":
        import redis.asyncio as aioredis
        client = aioredis.from_url(settings.redis_url)
        return RedisPointerStore(client, session_id, key_prefix=settings.pointer_key_prefix)
    if backend == "file":
        return JsonFilePointerStore(session_pointer_path(settings.pointer_file_path, session_id))
    raise ValueError(f"Unknown pointer backend: {backend}")
