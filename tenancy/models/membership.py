#!/usr/bin/env python3
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tenancy.core.database import Base


class Membership(Base):
    """Grants a user exactly one role within one organization."""

    __tablename__ = "memberships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Users live in the identity service; no FK
    user_id = Column(Integer, nullable=False, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    role = Column(String(20), nullable=False, default="employee")
    joined_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    organization = relationship("Organization", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_membership_user_organization"),
        CheckConstraint(
            "role IN ('employee', 'manager', 'hr', 'admin')",
            name="ck_membership_role"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Membership(user_id={self.user_id}, "
            f"organization_id={self.organization_id}, role={self.role})>"
        )
