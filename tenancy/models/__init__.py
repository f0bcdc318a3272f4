#!/usr/bin/env python3
from tenancy.core.database import Base
from .organization import Organization
from .membership import Membership

__all__ = [
    "Base",
    "Organization",
    "Membership",
]
