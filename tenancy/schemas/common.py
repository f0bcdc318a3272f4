#!/usr/bin/env python3
from math import ceil
from typing import Optional, Any, Generic, TypeVar, List

from pydantic import BaseModel, Field, model_validator

T = TypeVar('T')


class PaginatedResponse(BaseModel, Generic[T]):
    """
    One page of a list endpoint.

    ``total_pages`` and ``has_next`` are derived from ``total`` and
    ``page_size``; callers only pass the slice and the counts.
    """
    items: List[T]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_pages: int = 0
    has_next: bool = False

    @model_validator(mode="after")
    def derive_page_counts(self):
        self.total_pages = ceil(self.total / self.page_size)
        self.has_next = self.page < self.total_pages
        return self


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Body of HTTPException details: ``{"error": {...}}``."""
    error: ErrorDetail
