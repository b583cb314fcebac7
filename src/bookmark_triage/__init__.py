"""Разбор закладок браузера по одной."""

from .background import TriageController
from .collector import (
    BookmarkCollection,
    CollectionError,
    EmptyCollectionError,
    NotFoundError,
    collect_all,
    pick_next,
    remove_by_id,
)
from .models import BookmarkNode, FlatBookmark
from .parser import BookmarkParser
from .store import BookmarkStore, BookmarkStoreError, BrowserTabs

__all__ = [
    "TriageController",
    "BookmarkCollection",
    "CollectionError",
    "EmptyCollectionError",
    "NotFoundError",
    "collect_all",
    "pick_next",
    "remove_by_id",
    "BookmarkNode",
    "FlatBookmark",
    "BookmarkParser",
    "BookmarkStore",
    "BookmarkStoreError",
    "BrowserTabs",
]
