"""
Модуль ui.py
Консольный интерфейс разбора закладок: показ закладки,
выбор действия и подтверждение удаления.
"""
from typing import Any, Callable, Dict, Optional

from .logger import get_logger
from .utils import TextUtils

logger = get_logger(__name__)

# Ввод пользователя -> действие
ACTIONS = {
    "k": "keep", "keep": "keep",
    "d": "delete", "delete": "delete",
    "o": "open", "open": "open",
    "s": "skip", "skip": "skip", "": "skip",
    "q": "quit", "quit": "quit",
}

PROMPT = "[k] оставить  [d] удалить  [o] открыть  [s] пропустить  [q] выход > "
PATH_SEPARATOR = " / "
MAX_TITLE_LENGTH = 100


class ConsoleUI:
    """
    Показ закладок и чтение действий пользователя в терминале.
    """

    def __init__(self, input_func: Optional[Callable[[str], str]] = None,
                 output_func: Optional[Callable[[str], Any]] = None):
        self._input = input_func or input
        self._output = output_func or print

    def present_bookmark(self, bookmark: Dict[str, Any], remaining: Optional[int] = None) -> None:
        """
        Выводит закладку: заголовок, путь папок и URL.

        Аргументы:
            bookmark: Закладка из сообщения random-bookmark
            remaining: Сколько закладок осталось разобрать
        """
        title = TextUtils.truncate_text(bookmark.get("title") or "(без названия)", MAX_TITLE_LENGTH)
        path = PATH_SEPARATOR.join(bookmark.get("path") or []) or "(корень)"

        self._output("")
        if remaining is not None:
            self._output(f"Осталось закладок: {remaining}")
        self._output(f"  {title}")
        self._output(f"  Папка: {path}")
        self._output(f"  {bookmark.get('url') or ''}")

        domain = TextUtils.extract_domain(bookmark.get("url") or "")
        if domain:
            logger.debug(f"Показана закладка {bookmark.get('id')} ({domain})")

    def ask_action(self) -> str:
        """
        Запрашивает действие, пока не будет введено допустимое.

        Пустой ввод означает пропуск. Конец ввода означает выход.

        Возвращает:
            str: 'keep', 'delete', 'open', 'skip' или 'quit'
        """
        while True:
            try:
                answer = self._input(PROMPT)
            except EOFError:
                return "quit"

            action = ACTIONS.get(answer.strip().lower())
            if action is not None:
                return action
            self._output(f"Неизвестное действие: {answer.strip()}")

    def confirm_delete(self, bookmark: Dict[str, Any]) -> bool:
        """Спрашивает подтверждение удаления закладки."""
        try:
            answer = self._input(f"Удалить закладку «{bookmark.get('title') or bookmark.get('url')}»? [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes", "д", "да")

    def show_message(self, text: str) -> None:
        self._output(text)
