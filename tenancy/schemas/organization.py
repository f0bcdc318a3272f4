#!/usr/bin/env python3
import re
from datetime import datetime
from typing import Optional, Dict, List, Literal
from pydantic import BaseModel, Field, field_validator, model_validator

from tenancy.core.plans import PlanTier, Feature, DEFAULT_FEATURES

SLUG_PATTERN = r"^[a-z0-9-]+$"


def slugify(name: str) -> str:
    """Suggest a URL-safe slug from an organization name."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class OrganizationSettings(BaseModel):
    """Presentation settings owned by the settings collaborator."""
    timezone: str = "America/New_York"
    date_format: str = "MM/DD/YYYY"
    currency: str = Field(default="USD", min_length=3, max_length=3)


class Branding(BaseModel):
    primary_color: str = "#007bff"
    secondary_color: str = "#6c757d"
    accent_color: str = "#28a745"
    theme_mode: Literal['light', 'dark', 'auto'] = 'light'
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    company_name_display: Optional[str] = None


class OrganizationResponse(BaseModel):
    """Organization as seen by the session store and API clients."""
    id: int
    name: str
    slug: str = Field(..., pattern=SLUG_PATTERN)
    plan: PlanTier = PlanTier.FREE
    industry: Optional[str] = None
    domain: Optional[str] = None
    custom_domain: Optional[str] = None
    is_active: bool = True
    settings: OrganizationSettings = Field(default_factory=OrganizationSettings)
    branding: Branding = Field(default_factory=Branding)
    features: List[Feature] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrganizationBasicInfo(BaseModel):
    """Step one of the creation wizard."""
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    industry: str = Field(..., min_length=1, max_length=100)
    plan: PlanTier = PlanTier.FREE
    timezone: str = "America/New_York"

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Company name is required')
        return v.strip()

    @model_validator(mode='after')
    def fill_slug(self):
        if self.slug is None:
            suggested = slugify(self.name)
            if not suggested:
                raise ValueError('Company slug is required')
            self.slug = suggested
        return self


class CreateOrganizationRequest(BaseModel):
    """Two-step creation wizard payload: basic info, then feature toggles."""
    basic: OrganizationBasicInfo
    features: Dict[Feature, bool] = Field(default_factory=lambda: dict(DEFAULT_FEATURES))
    settings: Optional[OrganizationSettings] = None
    branding: Optional[Branding] = None

    def enabled_features(self) -> List[Feature]:
        return [feature for feature, enabled in self.features.items() if enabled]


class UpdateOrganizationRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    plan: Optional[PlanTier] = None
    industry: Optional[str] = Field(None, min_length=1, max_length=100)
    domain: Optional[str] = Field(None, max_length=255)
    custom_domain: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None
    features: Optional[List[Feature]] = None
