"""
Page and Widget ORM models.

- pages: screens of the mobile app; route is unique, at most one row has is_home set
- widgets: ordered UI components owned by a page, removed with it (ON DELETE CASCADE)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from miniapp.models import WIDGET_TYPES


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Page(Base):
    __tablename__ = "pages"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    route: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    is_home: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Deletion is left to the database cascade; the ORM never walks the children.
    widgets: Mapped[list["Widget"]] = relationship(
        "Widget",
        back_populates="page",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Widget.position",
    )

    __table_args__ = (
        Index("ix_pages_route", "route"),
        # Single home page, enforced by the database.
        Index(
            "uq_pages_single_home",
            "is_home",
            unique=True,
            postgresql_where=text("is_home"),
            sqlite_where=text("is_home = 1"),
        ),
    )


class Widget(Base):
    __tablename__ = "widgets"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    page_id: Mapped[UUID] = mapped_column(
        ForeignKey("pages.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    config: Mapped[Any] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    page: Mapped[Page] = relationship("Page", back_populates="widgets")

    __table_args__ = (
        CheckConstraint(
            "type IN (" + ", ".join(f"'{t}'" for t in WIDGET_TYPES) + ")",
            name="ck_widgets_type",
        ),
        Index("ix_widgets_page_id", "page_id"),
        Index("ix_widgets_page_position", "page_id", "position"),
        Index("ix_widgets_type", "type"),
    )
