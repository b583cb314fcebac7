"""
Модуль background.py
Обработчик сообщений от интерфейса: сбор закладок, удаление,
сохранение, пропуск и открытие закладки.
"""
from typing import Any, Dict, Optional

from .collector import BookmarkCollection, EmptyCollectionError, NotFoundError
from .logger import get_logger, log_error_with_context, log_function_call
from .store import BookmarkStore, BookmarkStoreError, BrowserTabs

logger = get_logger(__name__)

RANDOM_BOOKMARK = "random-bookmark"

Message = Dict[str, Any]


class TriageController:
    """
    Принимает сообщения интерфейса и отвечает следующей закладкой.

    Входящие сообщения: collect, delete, keep, skip, open.
    Исходящее сообщение: {"message": "random-bookmark", "bookmark": {...}}.
    """

    def __init__(self, store: BookmarkStore, tabs: Optional[BrowserTabs] = None,
                 collection: Optional[BookmarkCollection] = None):
        self.store = store
        self.tabs = tabs or BrowserTabs()
        self.collection = collection if collection is not None else BookmarkCollection()
        self._handlers = {
            "collect": self._on_collect,
            "delete": self._on_delete,
            "keep": self._on_keep,
            "skip": self._on_skip,
            "open": self._on_open,
        }

    async def handle_message(self, message: Message) -> Optional[Message]:
        """
        Обрабатывает одно сообщение интерфейса.

        Аргументы:
            message: Словарь с ключом 'message' и, при необходимости, 'id'

        Возвращает:
            dict: Сообщение со следующей закладкой или None, если показывать нечего

        Raises:
            ValueError: Если в сообщении delete/keep/open нет идентификатора
        """
        log_function_call("TriageController.handle_message", (), message)

        handler = self._handlers.get(message.get("message"))
        if handler is None:
            logger.warning(f"Неизвестное сообщение: {message}")
            return None

        return await handler(message)

    def next_bookmark(self) -> Optional[Message]:
        """Выбирает следующую закладку и формирует исходящее сообщение."""
        try:
            bookmark = self.collection.pick_next()
        except EmptyCollectionError:
            logger.info("Закладок для показа не осталось")
            return None

        return {"message": RANDOM_BOOKMARK, "bookmark": bookmark.to_dict()}

    @staticmethod
    def _require_id(message: Message) -> str:
        bookmark_id = message.get("id")
        if bookmark_id is None:
            raise ValueError(f"В сообщении '{message.get('message')}' отсутствует id")
        return str(bookmark_id)

    async def _on_collect(self, message: Message) -> Optional[Message]:
        tree = await self.store.get_bookmark_tree()
        self.collection.collect(tree)
        return self.next_bookmark()

    async def _on_delete(self, message: Message) -> Optional[Message]:
        bookmark_id = self._require_id(message)
        try:
            await self.store.remove_bookmark(bookmark_id)
        except (BookmarkStoreError, ValueError) as e:
            # Файл не изменен: закладка остается в списке и на экране
            log_error_with_context(e, {"bookmark_id": bookmark_id, "operation": "delete"})
            return self._current_bookmark(bookmark_id)

        self.collection.remove_by_id(bookmark_id)
        return self.next_bookmark()

    def _current_bookmark(self, bookmark_id: str) -> Optional[Message]:
        try:
            bookmark = self.collection.find_by_id(bookmark_id)
        except NotFoundError:
            return self.next_bookmark()
        return {"message": RANDOM_BOOKMARK, "bookmark": bookmark.to_dict()}

    async def _on_keep(self, message: Message) -> Optional[Message]:
        self.collection.remove_by_id(self._require_id(message))
        return self.next_bookmark()

    async def _on_skip(self, message: Message) -> Optional[Message]:
        return self.next_bookmark()

    async def _on_open(self, message: Message) -> Optional[Message]:
        bookmark_id = self._require_id(message)
        try:
            bookmark = self.collection.find_by_id(bookmark_id)
        except NotFoundError as e:
            log_error_with_context(e, {"bookmark_id": bookmark_id, "operation": "open"})
            return None

        if bookmark.url:
            self.tabs.open_tab(bookmark.url)
        return None
