#!/usr/bin/env python3
from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tenancy.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB, "postgresql")


class Organization(Base):
    """Organization (company) model for multi-tenancy support."""

    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    plan = Column(String(20), nullable=False, default="free")
    industry = Column(String(100), nullable=True)
    domain = Column(String(255), nullable=True)
    custom_domain = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Owned by the settings collaborator; stored as-is
    settings = Column(JSONType, nullable=False, default=dict)
    branding = Column(JSONType, nullable=False, default=dict)
    features = Column(JSONType, nullable=False, default=list)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    memberships = relationship(
        "Membership",
        back_populates="organization",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, slug={self.slug})>"
