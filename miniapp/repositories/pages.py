"""
Page Repository

Data access for pages, including the home-flag and route-uniqueness queries.
"""

from uuid import UUID

from sqlalchemy import delete, exists, func, select, update

from miniapp.core.orm import Page
from miniapp.repositories.base import BaseRepository


class PageRepository(BaseRepository[Page]):
    model = Page

    def add(self, page: Page) -> Page:
        self.session.add(page)
        return page

    def list_pages(self, page: int, per_page: int) -> tuple[list[Page], int]:
        """
        List pages newest first.

        Args:
            page: 1-based page number
            per_page: Page size

        Returns:
            (pages on this slice, total page count in the table)
        """
        total = self.session.execute(select(func.count()).select_from(Page)).scalar_one()
        result = self.session.execute(
            select(Page)
            .order_by(Page.created_at.desc(), Page.id)
            .limit(per_page)
            .offset((page - 1) * per_page)
        )
        return list(result.scalars().all()), total

    def get_home_page(self) -> Page | None:
        result = self.session.execute(select(Page).where(Page.is_home.is_(True)).limit(1))
        return result.scalar_one_or_none()

    def route_exists(self, route: str, exclude_id: UUID | None = None) -> bool:
        """Exact, case-sensitive route match, optionally ignoring one page."""
        condition = Page.route == route
        if exclude_id is not None:
            condition = condition & (Page.id != exclude_id)
        return bool(self.session.execute(select(exists().where(condition))).scalar())

    def unset_home_page(self) -> int:
        result = self.session.execute(
            update(Page)
            .where(Page.is_home.is_(True))
            .values(is_home=False)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def delete(self, page_id: UUID) -> int:
        # Widgets go with the page through ON DELETE CASCADE.
        result = self.session.execute(
            delete(Page).where(Page.id == page_id).execution_options(synchronize_session=False)
        )
        return result.rowcount
