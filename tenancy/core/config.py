#!/usr/bin/env python3
"""Application configuration using Pydantic settings."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra='ignore'
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./tenancy.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Redis (session pointer storage)
    redis_url: str = "redis://localhost:6379/0"
    pointer_key_prefix: str = "tenancy:last_company"

    # Session pointer backend: memory, file or redis
    pointer_backend: str = Field(default="file", pattern="^(memory|file|redis)$")
    pointer_file_path: str = ".tenancy_session.json"

    # Membership source (upstream collaborator)
    membership_api_url: str = "http://localhost:8000"
    membership_api_timeout: float = 10.0  # seconds

    # Tenant scoping of outbound requests
    tenant_header: str = "X-Company-Id"
    tenant_query_param: str = "company_id"
    scope_with_header: bool = True
    scope_with_query: bool = False

    # API Server
    api_v1_prefix: str = "/api/v1"
    service_port: int = Field(default=8000, validation_alias='HTTP_PORT')
    workers: int = 1
    debug: bool = False

    # App Info
    app_name: str = "Tenancy Gateway"
    app_description: str = "Organizations, memberships and tenant session context"
    docs_url: str = "/docs"

    # CORS
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(',') if origin.strip()]


# Global settings instance
settings = Settings()
