from __future__ import annotations

import json
import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from miniapp.core.errors import ConflictError, NotFoundError, ValidationError
from miniapp.core.orm import Widget
from miniapp.core.services.pages_service import require_page
from miniapp.models import (
    WIDGET_TYPES,
    ReorderWidgetsRequest,
    ReorderWidgetsResponse,
    WidgetCreateRequest,
    WidgetListResponse,
    WidgetResponse,
    WidgetUpdateRequest,
    is_valid_widget_type,
)
from miniapp.log_utils import log_event
from miniapp.repositories import WidgetRepository

logger = logging.getLogger("miniapp.widgets")

# Position value meaning "append after the last widget".
UNSET_POSITION = 0


def _log(event: str, **fields) -> None:
    log_event(logger, event, **fields)


def validate_widget_type(value: str) -> str:
    if not is_valid_widget_type(value):
        raise ValidationError(
            f"Invalid widget type. Must be one of: {', '.join(WIDGET_TYPES)}",
            details={"type": value},
        )
    return value


def validate_config(config: Any) -> Any:
    """
    Check that a decoded widget config is a well-formed JSON document.

    The value is opaque and stored as given, strings included. Only None
    means "not supplied"; anything that does not serialise back to strict
    JSON (NaN, Infinity, non-JSON types) is rejected.
    """
    if config is None:
        return None
    try:
        json.dumps(config, allow_nan=False)
    except (TypeError, ValueError):
        raise ValidationError("Invalid JSON format for widget config")
    return config


def _require_widget(repo: WidgetRepository, widget_id: UUID) -> Widget:
    widget = repo.get_by_id(widget_id)
    if widget is None:
        raise NotFoundError("Widget not found", details={"widget_id": str(widget_id)})
    return widget


def count_widgets(session: Session, page_id: UUID) -> int:
    return WidgetRepository(session).count_by_page(page_id)


def max_position(session: Session, page_id: UUID) -> int:
    return WidgetRepository(session).max_position(page_id)


def list_widgets(session: Session, page_id: UUID, widget_type: str | None = None) -> WidgetListResponse:
    require_page(session, page_id)
    if widget_type:
        validate_widget_type(widget_type)
    widgets = WidgetRepository(session).list_by_page(page_id, widget_type or None)
    return WidgetListResponse(
        widgets=[WidgetResponse.model_validate(w) for w in widgets],
        total=len(widgets),
    )


def create_widget(session: Session, page_id: UUID, payload: WidgetCreateRequest) -> WidgetResponse:
    require_page(session, page_id)
    widget_type = validate_widget_type(payload.type)
    config = validate_config(payload.config)

    position = payload.position if payload.position is not None else UNSET_POSITION
    if position < 0:
        raise ValidationError("Widget position cannot be negative")

    repo = WidgetRepository(session)
    if position == UNSET_POSITION:
        position = repo.max_position(page_id) + 1

    widget = repo.add(
        Widget(
            page_id=page_id,
            type=widget_type,
            position=position,
            config=config if config is not None else {},
        )
    )
    try:
        session.commit()
    except IntegrityError:
        # The page was deleted between the existence check and the insert.
        session.rollback()
        raise NotFoundError("Page not found", details={"page_id": str(page_id)})
    _log("widget_created", widget_id=widget.id, page_id=page_id, type=widget_type, position=position)
    return WidgetResponse.model_validate(widget)


def update_widget(session: Session, widget_id: UUID, payload: WidgetUpdateRequest) -> WidgetResponse:
    repo = WidgetRepository(session)
    widget = _require_widget(repo, widget_id)

    widget_type = validate_widget_type(payload.type) if payload.type is not None else None
    config = validate_config(payload.config)
    if payload.position is not None and payload.position < 1:
        raise ValidationError("Widget position must be a positive integer")

    if widget_type is None and payload.position is None and config is None:
        return WidgetResponse.model_validate(widget)

    # Positions are written as given; only reordering renumbers siblings.
    if widget_type is not None:
        widget.type = widget_type
    if payload.position is not None:
        widget.position = payload.position
    if config is not None:
        widget.config = config

    session.commit()
    _log("widget_updated", widget_id=widget_id)
    return WidgetResponse.model_validate(widget)


def delete_widget(session: Session, widget_id: UUID) -> None:
    repo = WidgetRepository(session)
    _require_widget(repo, widget_id)
    if repo.delete(widget_id) == 0:
        session.rollback()
        raise NotFoundError("Widget not found", details={"widget_id": str(widget_id)})
    session.commit()
    _log("widget_deleted", widget_id=widget_id)


def reorder_widgets(session: Session, page_id: UUID, payload: ReorderWidgetsRequest) -> ReorderWidgetsResponse:
    """
    Rewrite every widget position on a page to match ``payload.widget_ids``.

    Positions become 1..N in list order. The list must name each widget of
    the page exactly once; the whole rewrite commits or nothing does.
    """
    # Locks the page row so concurrent reorders of one page run one at a time.
    require_page(session, page_id, for_update=True)

    widget_ids = payload.widget_ids
    if not widget_ids:
        raise ValidationError("Widget IDs array cannot be empty")

    seen: set[UUID] = set()
    for widget_id in widget_ids:
        if widget_id in seen:
            raise ValidationError(
                "Duplicate widget ID in the list", details={"widget_id": str(widget_id)}
            )
        seen.add(widget_id)

    repo = WidgetRepository(session)
    count = repo.count_by_page(page_id)
    if len(widget_ids) != count:
        session.rollback()
        raise ValidationError(
            "The number of widget IDs must match the total widgets on the page",
            details={"expected": count, "received": len(widget_ids)},
        )

    for index, widget_id in enumerate(widget_ids):
        if repo.set_position(widget_id, page_id, index + 1) == 0:
            session.rollback()
            _log("reorder_aborted", page_id=page_id, widget_id=widget_id)
            raise ConflictError(
                f"widget {widget_id} not found on page {page_id}",
                details={"widget_id": str(widget_id), "page_id": str(page_id)},
            )
    session.commit()
    _log("widgets_reordered", page_id=page_id, count=len(widget_ids))

    widgets = repo.list_by_page(page_id)
    return ReorderWidgetsResponse(widgets=[WidgetResponse.model_validate(w) for w in widgets])
