"""
Модуль store.py
Доступ к хранилищу закладок браузера (JSON-файлу профиля) и к
открытию страниц в браузере.
"""
import json
import sys
import webbrowser
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import aiofiles.os

from .logger import get_logger, log_error_with_context, log_function_call
from .models import BookmarkNode
from .parser import BookmarkParser

logger = get_logger(__name__)

BACKUP_SUFFIX = ".triage.bak"

# Расположение профилей браузеров семейства Chromium относительно домашней директории
_CHROMIUM_PROFILE_DIRS = {
    "linux": [
        ".config/google-chrome/Default",
        ".config/chromium/Default",
        ".config/BraveSoftware/Brave-Browser/Default",
        ".config/microsoft-edge/Default",
    ],
    "darwin": [
        "Library/Application Support/Google/Chrome/Default",
        "Library/Application Support/Chromium/Default",
        "Library/Application Support/BraveSoftware/Brave-Browser/Default",
        "Library/Application Support/Microsoft Edge/Default",
    ],
    "win32": [
        "AppData/Local/Google/Chrome/User Data/Default",
        "AppData/Local/Chromium/User Data/Default",
        "AppData/Local/BraveSoftware/Brave-Browser/User Data/Default",
        "AppData/Local/Microsoft/Edge/User Data/Default",
    ],
}


class BookmarkStoreError(Exception):
    """Ошибка чтения или записи файла закладок."""


def find_default_bookmarks_file(home: Optional[Path] = None) -> Optional[Path]:
    """
    Ищет файл Bookmarks в стандартных профилях браузеров Chromium.

    Аргументы:
        home: Домашняя директория (по умолчанию Path.home())

    Возвращает:
        Path: Первый найденный файл или None
    """
    home = home or Path.home()
    platform = "linux" if sys.platform.startswith("linux") else sys.platform

    for profile_dir in _CHROMIUM_PROFILE_DIRS.get(platform, []):
        candidate = home / profile_dir / "Bookmarks"
        if candidate.is_file():
            logger.info(f"Найден файл закладок: {candidate}")
            return candidate

    logger.debug("Файл закладок в стандартных профилях не найден")
    return None


# Типы узлов-закладок в JSON Chrome и Firefox; папки и разделители не удаляются
_BOOKMARK_NODE_TYPES = ("url", "text/x-moz-place")


def _remove_node(children: List[Dict[str, Any]], bookmark_id: str) -> bool:
    """Удаляет закладку с указанным id из списка потомков (рекурсивно)."""
    for position, child in enumerate(children):
        if str(child.get("id")) == bookmark_id and child.get("type") in _BOOKMARK_NODE_TYPES:
            del children[position]
            return True
        if _remove_node(child.get("children", []), bookmark_id):
            return True
    return False


class BookmarkStore:
    """
    Хранилище закладок на основе JSON-файла браузера.

    Чтение дерева асинхронное; удаление закладки перезаписывает файл
    целиком через временный файл.
    """

    def __init__(self, file_path: str, fmt: str = "auto", backup: bool = True,
                 parser: Optional[BookmarkParser] = None):
        """
        Аргументы:
            file_path: Путь к файлу закладок
            fmt: Формат файла ('auto', 'chrome', 'firefox')
            backup: Делать копию файла перед первой записью
            parser: Парсер закладок
        """
        self.file_path = Path(file_path)
        self.fmt = fmt
        self.backup = backup
        self.parser = parser or BookmarkParser()
        self._backup_done = False

    async def _read_data(self) -> dict:
        try:
            async with aiofiles.open(self.file_path, 'r', encoding='utf-8') as file:
                content = await file.read()
        except OSError as e:
            log_error_with_context(e, {"file_path": str(self.file_path), "operation": "read"})
            raise BookmarkStoreError(f"Не удалось прочитать файл закладок: {self.file_path}") from e

        return self.parser.loads(content, source=str(self.file_path))

    async def get_bookmark_tree(self) -> BookmarkNode:
        """
        Читает файл закладок и возвращает корень дерева.

        Возвращает:
            BookmarkNode: Корень дерева закладок

        Raises:
            BookmarkStoreError: Если файл не удалось прочитать
            ValueError: Если структура файла некорректна
        """
        log_function_call("BookmarkStore.get_bookmark_tree", (str(self.file_path),))

        data = await self._read_data()
        return self.parser.parse_tree(data, self.fmt)

    async def remove_bookmark(self, bookmark_id: str) -> bool:
        """
        Удаляет закладку из файла.

        Аргументы:
            bookmark_id: Идентификатор закладки

        Возвращает:
            bool: True если закладка найдена и удалена, False если ее нет в файле

        Raises:
            BookmarkStoreError: Если файл не удалось прочитать или записать
        """
        log_function_call("BookmarkStore.remove_bookmark", (bookmark_id,))

        data = await self._read_data()
        if BookmarkParser.detect_format(data) == "chrome":
            # Корневые разделы (панель закладок, другие) сами не удаляются
            sections = [section for section in data["roots"].values() if isinstance(section, dict)]
            removed = any(_remove_node(section.get("children", []), bookmark_id) for section in sections)
        else:
            removed = _remove_node(data.get("children", []), bookmark_id)

        if not removed:
            logger.warning(f"Закладка {bookmark_id} отсутствует в файле {self.file_path}")
            return False

        # Контрольная сумма Chrome больше не соответствует содержимому
        data.pop("checksum", None)

        await self._write_data(data)
        logger.info(f"Закладка {bookmark_id} удалена из файла {self.file_path}")
        return True

    async def _write_data(self, data: dict) -> None:
        if self.backup and not self._backup_done:
            backup_path = self.file_path.with_name(self.file_path.name + BACKUP_SUFFIX)
            try:
                async with aiofiles.open(self.file_path, 'rb') as source:
                    content = await source.read()
                async with aiofiles.open(backup_path, 'wb') as target:
                    await target.write(content)
            except OSError as e:
                log_error_with_context(e, {"file_path": str(backup_path), "operation": "backup"})
                raise BookmarkStoreError(f"Не удалось создать резервную копию: {backup_path}") from e
            self._backup_done = True
            logger.info(f"Создана резервная копия файла закладок: {backup_path}")

        temp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            async with aiofiles.open(temp_path, 'w', encoding='utf-8') as file:
                await file.write(json.dumps(data, ensure_ascii=False, indent=3))
            await aiofiles.os.replace(temp_path, self.file_path)
        except OSError as e:
            log_error_with_context(e, {"file_path": str(self.file_path), "operation": "write"})
            if await aiofiles.os.path.exists(temp_path):
                await aiofiles.os.remove(temp_path)
            raise BookmarkStoreError(f"Не удалось записать файл закладок: {self.file_path}") from e


class BrowserTabs:
    """Открытие страниц в системном браузере."""

    def open_tab(self, url: str) -> bool:
        """
        Открывает URL в новой вкладке браузера.

        Возвращает:
            bool: True, если браузер удалось запустить
        """
        logger.info(f"Открытие страницы: {url}")
        opened = webbrowser.open_new_tab(url)
        if not opened:
            logger.warning(f"Не удалось открыть страницу в браузере: {url}")
        return opened
