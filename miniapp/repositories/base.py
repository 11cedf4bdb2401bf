"""
Base Repository

Shared session handling and primary-key lookups for the ORM repositories.
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from miniapp.core.orm import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, entity_id: UUID, for_update: bool = False) -> ModelT | None:
        """
        Fetch one row by primary key, bypassing stale identity-map state.

        Args:
            entity_id: Primary key
            for_update: Take a row lock (ignored by backends without SELECT ... FOR UPDATE)

        Returns:
            ORM object or None if not found
        """
        query = (
            select(self.model)
            .where(self.model.id == entity_id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        return self.session.execute(query).scalar_one_or_none()
