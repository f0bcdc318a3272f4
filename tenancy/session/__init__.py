from .store import TenancySessionStore
from .persistence import (
    PointerStore,
    InMemoryPointerStore,
    JsonFilePointerStore,
    RedisPointerStore,
    create_pointer_store,
)
from .sources import (
    MembershipSource,
    StaticMembershipSource,
    HttpMembershipSource,
    DatabaseMembershipSource,
)
from .scoping import TenantScopedAuth, scoped_client

__all__ = [
    "TenancySessionStore",
    "PointerStore",
    "InMemoryPointerStore",
    "JsonFilePointerStore",
    "RedisPointerStore",
    "create_pointer_store",
    "MembershipSource",
    "StaticMembershipSource",
    "HttpMembershipSource",
    "DatabaseMembershipSource",
    "TenantScopedAuth",
    "scoped_client",
]
