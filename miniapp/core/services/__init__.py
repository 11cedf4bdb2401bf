from miniapp.core.services.pages_service import (
    create_page,
    delete_page,
    get_page_with_widgets,
    list_pages,
    require_page,
    update_page,
)
from miniapp.core.services.widgets_service import (
    count_widgets,
    create_widget,
    delete_widget,
    list_widgets,
    max_position,
    reorder_widgets,
    update_widget,
)

__all__ = [
    "create_page",
    "delete_page",
    "get_page_with_widgets",
    "list_pages",
    "require_page",
    "update_page",
    "count_widgets",
    "create_widget",
    "delete_widget",
    "list_widgets",
    "max_position",
    "reorder_widgets",
    "update_widget",
]
