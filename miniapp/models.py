from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WidgetType(str, Enum):
    BANNER = "banner"
    PRODUCT_GRID = "product_grid"
    TEXT = "text"
    IMAGE = "image"
    SPACER = "spacer"


# Display order matters for error messages only.
WIDGET_TYPES: tuple[str, ...] = tuple(t.value for t in WidgetType)


def is_valid_widget_type(value: str) -> bool:
    """Exact, case-sensitive membership check against the fixed widget types."""
    return value in WIDGET_TYPES


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    ok: bool


class ReadyResponse(BaseModel):
    ready: bool
    reason: str | None = None


# --- Pages --------------------------------------------------------------------

class PageCreateRequest(BaseModel):
    name: str
    route: str
    is_home: bool = False


class PageUpdateRequest(BaseModel):
    """Partial update: a field left as None is absent and stays untouched."""

    name: Optional[str] = None
    route: Optional[str] = None
    is_home: Optional[bool] = None


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    route: str
    is_home: bool
    created_at: datetime
    updated_at: datetime


class WidgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    page_id: UUID
    type: str
    position: int
    config: Any
    created_at: datetime
    updated_at: datetime


class PageDetailResponse(PageResponse):
    widgets: list[WidgetResponse] = Field(default_factory=list)


class PageListResponse(BaseModel):
    pages: list[PageResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


# --- Widgets ------------------------------------------------------------------

class WidgetCreateRequest(BaseModel):
    type: str
    position: Optional[int] = Field(default=0, description="0 or null appends after the last widget on the page")
    config: Any = None


class WidgetUpdateRequest(BaseModel):
    """Partial update: a field left as None is absent and stays untouched."""

    type: Optional[str] = None
    position: Optional[int] = None
    config: Any = None


class WidgetListResponse(BaseModel):
    widgets: list[WidgetResponse]
    total: int


class ReorderWidgetsRequest(BaseModel):
    widget_ids: list[UUID]


class ReorderWidgetsResponse(BaseModel):
    message: str = "Widgets reordered successfully"
    widgets: list[WidgetResponse]
