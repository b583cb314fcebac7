"""
Модуль collector.py
Превращает дерево закладок в плоский список с путями папок и
выдает случайную закладку без повтора предыдущей.
"""
import random
import time
from typing import Dict, Iterator, List, Optional, Tuple

from .logger import get_logger, log_function_call, log_performance
from .models import BookmarkNode, FlatBookmark

logger = get_logger(__name__)

PathIndex = Dict[str, List[str]]


class CollectionError(Exception):
    """Базовая ошибка работы со списком закладок."""


class EmptyCollectionError(CollectionError):
    """Запрошен выбор закладки из пустого списка."""


class NotFoundError(CollectionError):
    """Закладка с указанным идентификатором отсутствует в списке."""


def calculate_bookmark_paths(node: BookmarkNode, path: List[str], index: PathIndex) -> PathIndex:
    """
    Заполняет индекс путей для всех листьев поддерева.

    Заголовок узла кладется в стек перед обходом потомков и снимается
    после него. Лист получает в индекс только заголовки своих предков.

    Аргументы:
        node: Текущий узел
        path: Стек заголовков предков (изменяется на месте и восстанавливается)
        index: Индекс путей, который нужно дополнить

    Возвращает:
        PathIndex: Тот же индекс
    """
    if not node.children:
        index[node.id] = list(path)
        return index

    pushed = bool(node.title)
    if pushed:
        path.append(node.title)

    for child in node.children:
        calculate_bookmark_paths(child, path, index)

    if pushed:
        path.pop()

    return index


def collect_bookmarks(node: BookmarkNode, index: PathIndex, out: List[FlatBookmark]) -> List[FlatBookmark]:
    """
    Добавляет в out все закладки поддерева в порядке обхода в глубину.

    Папки и разделители не собираются.
    """
    if node.type == "bookmark":
        out.append(FlatBookmark(id=node.id, title=node.title, url=node.url, path=list(index.get(node.id, []))))

    for child in node.children or []:
        collect_bookmarks(child, index, out)

    return out


def collect_all(tree: BookmarkNode) -> Tuple[List[FlatBookmark], PathIndex]:
    """
    Строит плоский список закладок и индекс путей по всему дереву.

    Заголовок корня в пути не попадает.

    Аргументы:
        tree: Корень дерева закладок

    Возвращает:
        tuple: (список FlatBookmark, индекс путей)
    """
    index: PathIndex = {}
    if tree.children:
        for child in tree.children:
            calculate_bookmark_paths(child, [], index)
    else:
        index[tree.id] = []

    bookmarks = collect_bookmarks(tree, index, [])
    return bookmarks, index


def pick_next(bookmarks: List[FlatBookmark], previous_id: Optional[str] = None,
              rng: Optional[random.Random] = None) -> FlatBookmark:
    """
    Выбирает случайную закладку, отличную от показанной последней.

    Если предыдущая закладка есть в списке, выбор делается среди остальных
    n-1 закладок, поэтому число попыток ограничено одной.

    Аргументы:
        bookmarks: Текущий список закладок
        previous_id: Идентификатор последней показанной закладки
        rng: Генератор случайных чисел (по умолчанию модуль random)

    Возвращает:
        FlatBookmark: Выбранная закладка

    Raises:
        EmptyCollectionError: Если список пуст
    """
    if not bookmarks:
        raise EmptyCollectionError("Нет закладок для показа")

    randrange = (rng or random).randrange
    count = len(bookmarks)
    if count == 1:
        return bookmarks[0]

    previous_index = next(
        (i for i, bookmark in enumerate(bookmarks) if bookmark.id == previous_id), None
    )
    if previous_index is None:
        return bookmarks[randrange(count)]

    choice = randrange(count - 1)
    if choice >= previous_index:
        choice += 1
    return bookmarks[choice]


def remove_by_id(bookmarks: List[FlatBookmark], bookmark_id: str, index: Optional[PathIndex] = None) -> bool:
    """
    Удаляет закладку из списка и ее путь из индекса.

    Неизвестный идентификатор игнорируется.

    Возвращает:
        bool: True, если закладка была удалена
    """
    for position, bookmark in enumerate(bookmarks):
        if bookmark.id == bookmark_id:
            del bookmarks[position]
            if index is not None:
                index.pop(bookmark_id, None)
            return True

    logger.debug(f"Закладка для удаления не найдена: {bookmark_id}")
    return False


class BookmarkCollection:
    """
    Состояние сеанса разбора: плоский список закладок, индекс путей
    и идентификатор последней показанной закладки.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Аргументы:
            rng: Генератор случайных чисел; задается для воспроизводимых сеансов
        """
        self.rng = rng or random.Random()
        self.bookmarks: List[FlatBookmark] = []
        self.path_index: PathIndex = {}
        self.last_shown_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self.bookmarks)

    def __iter__(self) -> Iterator[FlatBookmark]:
        return iter(self.bookmarks)

    def __contains__(self, bookmark_id: object) -> bool:
        return any(bookmark.id == bookmark_id for bookmark in self.bookmarks)

    def collect(self, tree: BookmarkNode) -> List[FlatBookmark]:
        """
        Полностью пересобирает список закладок по дереву.

        Сбрасывает последнюю показанную закладку.

        Аргументы:
            tree: Корень дерева закладок

        Возвращает:
            list: Новый список закладок
        """
        start_time = time.time()
        log_function_call("BookmarkCollection.collect", (tree.id,))

        self.bookmarks, self.path_index = collect_all(tree)
        self.last_shown_id = None

        log_performance("collect", time.time() - start_time, f"bookmarks={len(self.bookmarks)}")
        logger.info(f"Собрано закладок: {len(self.bookmarks)}")
        return self.bookmarks

    def pick_next(self) -> FlatBookmark:
        """
        Выбирает следующую закладку и запоминает ее как показанную.

        Raises:
            EmptyCollectionError: Если закладок не осталось
        """
        bookmark = pick_next(self.bookmarks, self.last_shown_id, self.rng)
        self.last_shown_id = bookmark.id
        logger.debug(f"Выбрана закладка: {bookmark.id} ({bookmark.title})")
        return bookmark

    def remove_by_id(self, bookmark_id: str) -> bool:
        """Удаляет закладку из списка и индекса путей."""
        return remove_by_id(self.bookmarks, bookmark_id, self.path_index)

    def find_by_id(self, bookmark_id: str) -> FlatBookmark:
        """
        Ищет закладку по идентификатору.

        Raises:
            NotFoundError: Если закладки нет в списке
        """
        for bookmark in self.bookmarks:
            if bookmark.id == bookmark_id:
                return bookmark
        raise NotFoundError(f"Закладка не найдена: {bookmark_id}")
