"""
Модуль parser.py
Обеспечивает парсинг JSON-файлов закладок браузеров Chrome и Firefox.
Строит дерево узлов BookmarkNode в едином формате.
"""
import json
from typing import Any, Dict, List, Optional

from .logger import get_logger, log_error_with_context, log_function_call
from .models import BookmarkNode

logger = get_logger(__name__)

# Типы узлов Chrome -> внутренние типы
CHROME_NODE_TYPES = {
    "url": "bookmark",
    "folder": "folder",
}

# Типы узлов резервной копии Firefox -> внутренние типы
FIREFOX_NODE_TYPES = {
    "text/x-moz-place": "bookmark",
    "text/x-moz-place-container": "folder",
    "text/x-moz-place-separator": "separator",
}

ROOT_ID = "0"


class BookmarkParser:
    """
    Класс для парсинга JSON-файла закладок.
    Поддерживает файл Bookmarks браузеров семейства Chromium и
    JSON-резервную копию закладок Firefox.
    """

    def load_json(self, file_path: str) -> dict:
        """
        Загружает и валидирует JSON-файл закладок.

        Аргументы:
            file_path: Путь к JSON-файлу закладок

        Возвращает:
            dict: Словарь с данными закладок

        Raises:
            FileNotFoundError: Если файл не найден
            json.JSONDecodeError: Если файл содержит некорректный JSON
            ValueError: Если структура JSON некорректна
        """
        log_function_call("load_json", (file_path,))

        logger.info(f"Загрузка JSON-файла закладок: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as file:
                content = file.read()
        except FileNotFoundError:
            log_error_with_context(
                FileNotFoundError(f"Файл не найден: {file_path}"),
                {"file_path": file_path, "operation": "load_json"}
            )
            raise

        return self.loads(content, source=file_path)

    def loads(self, content: str, source: str = "<string>") -> dict:
        """
        Разбирает и валидирует содержимое файла закладок.

        Аргументы:
            content: Текст JSON
            source: Имя источника для сообщений об ошибках

        Возвращает:
            dict: Словарь с данными закладок
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            log_error_with_context(
                e,
                {"file_path": source, "operation": "json_parse", "error_line": e.lineno}
            )
            raise

        # Валидация структуры
        if self.detect_format(data) is None:
            error_msg = (
                f"Некорректная структура JSON в файле {source}: "
                "ожидается файл Bookmarks Chrome или резервная копия Firefox"
            )
            log_error_with_context(ValueError(error_msg), {"file_path": source})
            raise ValueError(error_msg)

        logger.debug(f"Файл JSON успешно загружен и валидирован: {source}")
        return data

    @staticmethod
    def detect_format(data: Any) -> Optional[str]:
        """
        Определяет формат данных закладок.

        Аргументы:
            data: Разобранный JSON

        Возвращает:
            str: 'chrome', 'firefox' или None, если формат не распознан
        """
        if not isinstance(data, dict):
            return None
        if isinstance(data.get("roots"), dict):
            return "chrome"
        if data.get("type") == "text/x-moz-place-container" or data.get("root") == "placesRoot":
            return "firefox"
        return None

    def parse_tree(self, data: dict, fmt: str = "auto") -> BookmarkNode:
        """
        Строит дерево BookmarkNode из данных закладок.

        Аргументы:
            data: Словарь с данными закладок (результат load_json)
            fmt: 'auto', 'chrome' или 'firefox'

        Возвращает:
            BookmarkNode: Корень дерева (без заголовка)

        Raises:
            ValueError: Если формат не распознан или не совпадает с указанным
        """
        log_function_call("parse_tree", (), {"fmt": fmt})

        detected = self.detect_format(data)
        if fmt == "auto":
            fmt = detected
        if fmt is None or fmt != detected:
            raise ValueError(f"Данные закладок не соответствуют формату: {fmt}")

        if fmt == "chrome":
            root = self._parse_chrome_roots(data["roots"])
        else:
            root = self._parse_firefox_node(data)
            # Заголовок корня никогда не входит в путь
            root.title = None

        logger.info(f"Дерево закладок построено (формат: {fmt})")
        return root

    def _parse_chrome_roots(self, roots: Dict[str, Any]) -> BookmarkNode:
        """
        Собирает синтетический корень из корневых разделов Chrome.

        Аргументы:
            roots: Поле 'roots' файла Bookmarks

        Возвращает:
            BookmarkNode: Корень с разделами bookmark_bar, other, synced и т.д.
        """
        logger.debug(f"Найдены корневые разделы: {list(roots.keys())}")

        children: List[BookmarkNode] = []
        for section_name, section in roots.items():
            # В старых файлах встречается служебный ключ sync_transaction_version
            if not isinstance(section, dict):
                logger.debug(f"Пропущен служебный ключ раздела: {section_name}")
                continue
            node = self._parse_chrome_node(section)
            if node is not None:
                children.append(node)

        return BookmarkNode(id=ROOT_ID, type="folder", children=children)

    def _parse_chrome_node(self, node: Dict[str, Any]) -> Optional[BookmarkNode]:
        """
        Рекурсивно преобразует узел Chrome.

        Аргументы:
            node: Узел из JSON-файла закладок

        Возвращает:
            BookmarkNode или None для неизвестного типа узла
        """
        raw_type = node.get("type", "")
        node_type = CHROME_NODE_TYPES.get(raw_type)
        title = node.get("name")

        if node_type is None:
            logger.warning(f"Неизвестный тип узла закладки: {raw_type}, заголовок: {title}")
            return None

        if node_type == "folder":
            children = [
                child for child in
                (self._parse_chrome_node(item) for item in node.get("children", []))
                if child is not None
            ]
            return BookmarkNode(id=str(node.get("id", "")), type="folder", title=title, children=children)

        return BookmarkNode(id=str(node.get("id", "")), type="bookmark", title=title, url=node.get("url"))

    def _parse_firefox_node(self, node: Dict[str, Any]) -> BookmarkNode:
        """
        Рекурсивно преобразует узел резервной копии Firefox.

        Неизвестные дочерние узлы пропускаются с предупреждением.

        Аргументы:
            node: Узел JSON (type = text/x-moz-place*)

        Возвращает:
            BookmarkNode: Преобразованный узел
        """
        node_type = FIREFOX_NODE_TYPES[node.get("type", "text/x-moz-place-container")]
        node_id = str(node.get("id", node.get("guid", "")))

        if node_type != "folder":
            return BookmarkNode(id=node_id, type=node_type, title=node.get("title"), url=node.get("uri"))

        children = []
        for child in node.get("children", []):
            if child.get("type") not in FIREFOX_NODE_TYPES:
                logger.warning(
                    f"Неизвестный тип узла закладки: {child.get('type')}, заголовок: {child.get('title')}"
                )
                continue
            children.append(self._parse_firefox_node(child))

        return BookmarkNode(id=node_id, type="folder", title=node.get("title"), children=children)
