# Data access layer
from miniapp.repositories.base import BaseRepository
from miniapp.repositories.pages import PageRepository
from miniapp.repositories.widgets import WidgetRepository

__all__ = [
    "BaseRepository",
    "PageRepository",
    "WidgetRepository",
]
