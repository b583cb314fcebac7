"""
Модуль models.py
Содержит модели данных для разбора закладок по одной.
Используется dataclass для удобного представления структур.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from typing_extensions import Literal

NodeType = Literal['bookmark', 'folder', 'separator']


@dataclass
class BookmarkNode:
    """
    Узел дерева закладок в том виде, в каком его отдает хранилище браузера.

    Атрибуты:
        id: Идентификатор узла (уникален в пределах дерева)
        type: Тип узла ('bookmark', 'folder' или 'separator')
        title: Заголовок узла (у корня обычно отсутствует)
        url: URL-адрес (только у закладок)
        children: Дочерние узлы (только у папок)
    """
    id: str
    type: NodeType
    title: Optional[str] = None
    url: Optional[str] = None
    children: Optional[List['BookmarkNode']] = None


@dataclass
class FlatBookmark:
    """
    Закладка, подготовленная для показа пользователю.

    Атрибуты:
        id: Идентификатор закладки
        title: Заголовок закладки
        url: URL-адрес страницы
        path: Заголовки папок-предков, начиная с уровня под корнем
    """
    id: str
    title: Optional[str]
    url: Optional[str]
    path: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Представление закладки для исходящего сообщения."""
        return asdict(self)
