"""
Widget Repository

Data access for widgets: ordered listing, position helpers and the
per-row position update used by reordering.
"""

from uuid import UUID

from sqlalchemy import delete, func, select, update

from miniapp.core.orm import Widget
from miniapp.repositories.base import BaseRepository


class WidgetRepository(BaseRepository[Widget]):
    model = Widget

    def add(self, widget: Widget) -> Widget:
        self.session.add(widget)
        return widget

    def list_by_page(self, page_id: UUID, widget_type: str | None = None) -> list[Widget]:
        """
        Widgets of a page ordered by position ascending.

        Args:
            page_id: Owning page
            widget_type: Optional exact type filter

        Returns:
            List of Widget ORM objects, freshly loaded
        """
        query = select(Widget).where(Widget.page_id == page_id)
        if widget_type:
            query = query.where(Widget.type == widget_type)
        query = query.order_by(Widget.position.asc(), Widget.created_at.asc()).execution_options(
            populate_existing=True
        )
        return list(self.session.execute(query).scalars().all())

    def count_by_page(self, page_id: UUID) -> int:
        return self.session.execute(
            select(func.count()).select_from(Widget).where(Widget.page_id == page_id)
        ).scalar_one()

    def max_position(self, page_id: UUID) -> int:
        return self.session.execute(
            select(func.coalesce(func.max(Widget.position), 0)).where(Widget.page_id == page_id)
        ).scalar_one()

    def set_position(self, widget_id: UUID, page_id: UUID, position: int) -> int:
        """Update one widget's position, scoped to its page. Returns affected rows."""
        result = self.session.execute(
            update(Widget)
            .where(Widget.id == widget_id, Widget.page_id == page_id)
            .values(position=position)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete(self, widget_id: UUID) -> int:
        result = self.session.execute(
            delete(Widget).where(Widget.id == widget_id).execution_options(synchronize_session=False)
        )
        return result.rowcount
