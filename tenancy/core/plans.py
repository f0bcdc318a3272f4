#!/usr/bin/env python3
"""Plan tier and feature toggle registry.

Seat and storage limits are published here as data only; enforcement
happens in the billing and storage services.
"""
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel


class PlanTier(str, Enum):
    """Commercial subscription level of an organization."""
    FREE = "free"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class PlanLimits(BaseModel):
    """Seat and storage limits of a plan. None means unlimited."""
    max_seats: Optional[int] = None
    max_storage_gb: Optional[int] = None


PLAN_LIMITS: Dict[PlanTier, PlanLimits] = {
    PlanTier.FREE: PlanLimits(max_seats=5, max_storage_gb=1),
    PlanTier.BASIC: PlanLimits(max_seats=20, max_storage_gb=10),
    PlanTier.PROFESSIONAL: PlanLimits(max_seats=50, max_storage_gb=50),
    PlanTier.ENTERPRISE: PlanLimits(),
}


def get_plan_limits(plan: PlanTier) -> PlanLimits:
    """Return the limits published for a plan tier."""
    return PLAN_LIMITS[PlanTier(plan)]


class Feature(str, Enum):
    """Feature modules that can be toggled per organization."""
    EMPLOYEE_MANAGEMENT = "employee_management"
    ATTENDANCE_TRACKING = "attendance_tracking"
    LEAVE_MANAGEMENT = "leave_management"
    TIMESHEET_MANAGEMENT = "timesheet_management"
    PROJECT_MANAGEMENT = "project_management"
    TASK_MANAGEMENT = "task_management"
    KANBAN_BOARDS = "kanban_boards"
    PERFORMANCE_APPRAISAL = "performance_appraisal"
    SKILLS_MANAGEMENT = "skills_management"
    PAYROLL_MANAGEMENT = "payroll_management"
    INVOICE_MANAGEMENT = "invoice_management"
    ACCOUNTING_BOOKKEEPING = "accounting_bookkeeping"
    EXPENSE_TRACKING = "expense_tracking"
    LEADS_MANAGEMENT = "leads_management"
    ADVANCED_REPORTS = "advanced_reports"
    ANALYTICS_DASHBOARD = "analytics_dashboard"
    DOCUMENT_MANAGEMENT = "document_management"


# Toggles pre-selected in step two of the creation wizard
DEFAULT_FEATURES: Dict[Feature, bool] = {
    feature: feature in {
        Feature.EMPLOYEE_MANAGEMENT,
        Feature.ATTENDANCE_TRACKING,
        Feature.LEAVE_MANAGEMENT,
        Feature.PERFORMANCE_APPRAISAL,
        Feature.PAYROLL_MANAGEMENT,
        Feature.DOCUMENT_MANAGEMENT,
    }
    for feature in Feature
}
