from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from miniapp.core.errors import NotFoundError
from miniapp.core.services.pages_service import (
    create_page,
    delete_page,
    get_page_with_widgets,
    list_pages,
    update_page,
)
from miniapp.core.services.widgets_service import create_widget, list_widgets, reorder_widgets
from miniapp.deps import get_session, parse_id, require_api_key
from miniapp.models import (
    ErrorResponse,
    MessageResponse,
    PageCreateRequest,
    PageDetailResponse,
    PageListResponse,
    PageResponse,
    PageUpdateRequest,
    ReorderWidgetsRequest,
    ReorderWidgetsResponse,
    WidgetCreateRequest,
    WidgetListResponse,
    WidgetResponse,
)

router = APIRouter(
    prefix="/pages",
    tags=["pages"],
    dependencies=[Depends(require_api_key)],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

SessionDep = Annotated[Session, Depends(get_session)]


@router.get("", response_model=PageListResponse, responses=ERROR_RESPONSES)
def list_pages_endpoint(
    session: SessionDep,
    page: int | None = Query(default=None, description="1-based page number"),
    per_page: int | None = Query(default=None, description="Page size, at most 100"),
) -> PageListResponse:
    return list_pages(session, page=page, per_page=per_page)


@router.post(
    "",
    response_model=PageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_page_endpoint(payload: PageCreateRequest, session: SessionDep) -> PageResponse:
    return create_page(session, payload)


@router.get("/{id}", response_model=PageDetailResponse, responses=ERROR_RESPONSES)
def get_page_endpoint(id: str, session: SessionDep) -> PageDetailResponse:
    page_id = parse_id(id, "page")
    page = get_page_with_widgets(session, page_id)
    if page is None:
        raise NotFoundError("Page not found", details={"page_id": str(page_id)})
    return page


@router.put("/{id}", response_model=PageResponse, responses=ERROR_RESPONSES)
def update_page_endpoint(id: str, payload: PageUpdateRequest, session: SessionDep) -> PageResponse:
    return update_page(session, parse_id(id, "page"), payload)


@router.delete("/{id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
def delete_page_endpoint(id: str, session: SessionDep) -> MessageResponse:
    delete_page(session, parse_id(id, "page"))
    return MessageResponse(message="Page deleted successfully")


@router.get("/{id}/widgets", response_model=WidgetListResponse, responses=ERROR_RESPONSES)
def list_widgets_endpoint(
    id: str,
    session: SessionDep,
    type: str | None = Query(default=None, description="Only widgets of this type"),
) -> WidgetListResponse:
    return list_widgets(session, parse_id(id, "page"), widget_type=type or None)


@router.post(
    "/{id}/widgets",
    response_model=WidgetResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_widget_endpoint(id: str, payload: WidgetCreateRequest, session: SessionDep) -> WidgetResponse:
    return create_widget(session, parse_id(id, "page"), payload)


@router.post("/{id}/widgets/reorder", response_model=ReorderWidgetsResponse, responses=ERROR_RESPONSES)
def reorder_widgets_endpoint(
    id: str, payload: ReorderWidgetsRequest, session: SessionDep
) -> ReorderWidgetsResponse:
    return reorder_widgets(session, parse_id(id, "page"), payload)
