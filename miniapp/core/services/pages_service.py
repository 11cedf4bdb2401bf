from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from miniapp.core.errors import ConflictError, NotFoundError, ValidationError
from miniapp.core.orm import Page
from miniapp.models import (
    PageCreateRequest,
    PageDetailResponse,
    PageListResponse,
    PageResponse,
    PageUpdateRequest,
    WidgetResponse,
)
from miniapp.log_utils import log_event
from miniapp.repositories import PageRepository, WidgetRepository

logger = logging.getLogger("miniapp.pages")

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def _log(event: str, **fields) -> None:
    log_event(logger, event, **fields)


def _required_text(value: str, message: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def _commit(session: Session, **details) -> None:
    # Unique indexes back up the pre-checks when two writers race.
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("page write rejected by unique index", exc_info=True)
        raise ConflictError(
            "Page route or home page changed concurrently; retry the request",
            details={k: str(v) for k, v in details.items()},
        )


def require_page(session: Session, page_id: UUID, for_update: bool = False) -> Page:
    page = PageRepository(session).get_by_id(page_id, for_update=for_update)
    if page is None:
        raise NotFoundError("Page not found", details={"page_id": str(page_id)})
    return page


def list_pages(session: Session, page: int | None = None, per_page: int | None = None) -> PageListResponse:
    page = page if page and page > 0 else 1
    per_page = per_page if per_page and 0 < per_page <= MAX_PER_PAGE else DEFAULT_PER_PAGE
    rows, total = PageRepository(session).list_pages(page, per_page)
    return PageListResponse(
        pages=[PageResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        per_page=per_page,
        total_pages=(total + per_page - 1) // per_page,
    )


def get_page_with_widgets(session: Session, page_id: UUID) -> PageDetailResponse | None:
    page = PageRepository(session).get_by_id(page_id)
    if page is None:
        return None
    widgets = WidgetRepository(session).list_by_page(page_id)
    return PageDetailResponse(
        **PageResponse.model_validate(page).model_dump(),
        widgets=[WidgetResponse.model_validate(w) for w in widgets],
    )


def create_page(session: Session, payload: PageCreateRequest) -> PageResponse:
    name = _required_text(payload.name, "Page name is required and cannot be empty")
    route = _required_text(payload.route, "Page route is required and cannot be empty")

    pages = PageRepository(session)
    if pages.route_exists(route):
        raise ConflictError("Page route already exists", details={"route": route})

    # Clearing the old home and inserting the new page share one transaction.
    if payload.is_home:
        cleared = pages.unset_home_page()
        if cleared:
            _log("home_page_cleared", count=cleared)

    page = pages.add(Page(name=name, route=route, is_home=payload.is_home))
    _commit(session, route=route)
    _log("page_created", page_id=page.id, route=page.route, is_home=page.is_home)
    return PageResponse.model_validate(page)


def update_page(session: Session, page_id: UUID, payload: PageUpdateRequest) -> PageResponse:
    pages = PageRepository(session)
    page = require_page(session, page_id)

    name = route = None
    if payload.name is not None:
        name = _required_text(payload.name, "Page name cannot be empty")
    if payload.route is not None:
        route = _required_text(payload.route, "Page route cannot be empty")
        if pages.route_exists(route, exclude_id=page_id):
            raise ConflictError("Page route already exists", details={"route": route})

    if name is None and route is None and payload.is_home is None:
        return PageResponse.model_validate(page)

    if payload.is_home and not page.is_home:
        pages.unset_home_page()
        _log("home_page_moved", page_id=page_id)

    if name is not None:
        page.name = name
    if route is not None:
        page.route = route
    if payload.is_home is not None:
        page.is_home = payload.is_home

    _commit(session, page_id=page_id)
    _log("page_updated", page_id=page_id)
    return PageResponse.model_validate(page)


def delete_page(session: Session, page_id: UUID) -> None:
    page = require_page(session, page_id, for_update=True)
    if page.is_home:
        session.rollback()
        raise ConflictError(
            "Cannot delete the home page. Set another page as home first.",
            details={"page_id": str(page_id)},
        )

    if PageRepository(session).delete(page_id) == 0:
        session.rollback()
        raise NotFoundError("Page not found", details={"page_id": str(page_id)})
    session.commit()
    _log("page_deleted", page_id=page_id)
