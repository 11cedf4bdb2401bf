from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from miniapp.core.services.widgets_service import delete_widget, update_widget
from miniapp.deps import get_session, parse_id, require_api_key
from miniapp.models import ErrorResponse, MessageResponse, WidgetResponse, WidgetUpdateRequest

router = APIRouter(
    prefix="/widgets",
    tags=["widgets"],
    dependencies=[Depends(require_api_key)],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

SessionDep = Annotated[Session, Depends(get_session)]


@router.put("/{id}", response_model=WidgetResponse, responses=ERROR_RESPONSES)
def update_widget_endpoint(id: str, payload: WidgetUpdateRequest, session: SessionDep) -> WidgetResponse:
    return update_widget(session, parse_id(id, "widget"), payload)


@router.delete("/{id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
def delete_widget_endpoint(id: str, session: SessionDep) -> MessageResponse:
    delete_widget(session, parse_id(id, "widget"))
    return MessageResponse(message="Widget deleted successfully")
