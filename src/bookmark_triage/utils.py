"""
Модуль utils.py
Вспомогательные утилиты для работы с текстом закладок.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

# Настройка логера для модуля
logger = logging.getLogger(__name__)


class TextUtils:
    """Утилиты для обработки текста и строк."""

    @staticmethod
    def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
        """
        Обрезает текст до указанной длины.

        Аргументы:
            text: Исходный текст
            max_length: Максимальная длина
            suffix: Суффикс для обозначения обрезки

        Возвращает:
            str: Обрезанный текст
        """
        if len(text) <= max_length:
            return text

        return text[: max_length - len(suffix)] + suffix

    @staticmethod
    def extract_domain(url: str) -> Optional[str]:
        """
        Извлекает домен из URL.

        Аргументы:
            url: URL-адрес

        Возвращает:
            str: Домен или None, если его нет
        """
        try:
            parsed = urlparse(url)
        except ValueError as e:
            logger.debug(f"Не удалось разобрать URL {url}: {e}")
            return None
        return parsed.netloc or None
