"""
Модуль config.py
Управляет конфигурацией приложения через .env-файл.
Обеспечивает валидацию и доступ к параметрам конфигурации.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .logger import get_logger

logger = get_logger(__name__)

VALID_FORMATS = ("auto", "chrome", "firefox")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """
    Класс конфигурации приложения.
    Все поля загружаются из .env-файла.
    """

    # Хранилище закладок
    bookmarks_file: str
    bookmarks_format: str
    backup_before_write: bool

    # Сеанс разбора
    confirm_delete: bool

    # Настройки логирования
    log_level: str
    log_file: str

    random_seed: Optional[int] = None


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class ConfigManager:
    """
    Менеджер конфигурации приложения.
    Загружает параметры из .env-файла и предоставляет валидацию.
    """

    def __init__(self, env_path: Optional[str] = None):
        """
        Инициализация менеджера конфигурации.

        Аргументы:
            env_path: Путь к .env-файлу (по умолчанию .env в текущей директории)
        """
        logger.debug(f"Инициализация ConfigManager с env_path: {env_path}")

        load_dotenv(env_path or ".env", override=True)
        self.config = self._load_config()
        self._validate_config()

        logger.info("ConfigManager успешно инициализирован")
        logger.debug(
            f"Загружена конфигурация: bookmarks_file={self.config.bookmarks_file}, "
            f"log_level={self.config.log_level}"
        )

    def _load_config(self) -> Config:
        """
        Загружает конфигурацию из переменных окружения.

        Возвращает:
            Config: Объект с загруженной конфигурацией

        Raises:
            ValueError: Если числовой параметр задан некорректно
        """
        logger.debug("Загрузка конфигурации из переменных окружения")

        seed_raw = os.getenv("RANDOM_SEED", "").strip()

        try:
            config = Config(
                bookmarks_file=os.getenv("BOOKMARKS_FILE", ""),
                bookmarks_format=os.getenv("BOOKMARKS_FORMAT", "auto").strip().lower(),
                backup_before_write=_env_bool("BACKUP_BEFORE_WRITE", "true"),
                confirm_delete=_env_bool("CONFIRM_DELETE", "true"),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                log_file=os.getenv("LOG_FILE", "./bookmark_triage.log"),
                random_seed=int(seed_raw) if seed_raw else None,
            )

            logger.debug("Конфигурация успешно загружена из переменных окружения")
            return config

        except ValueError as e:
            logger.error(f"Ошибка при загрузке конфигурации: {e}")
            raise

    def _validate_config(self) -> None:
        """
        Валидирует параметры конфигурации.

        Raises:
            ValueError: Если параметры заданы некорректно
        """
        logger.debug("Валидация конфигурации")

        validation_errors = []

        if self.config.bookmarks_format not in VALID_FORMATS:
            error_msg = (
                f"BOOKMARKS_FORMAT должен быть одним из {', '.join(VALID_FORMATS)}: "
                f"{self.config.bookmarks_format}"
            )
            validation_errors.append(error_msg)
            logger.error(error_msg)

        if self.config.log_level.upper() not in VALID_LOG_LEVELS:
            error_msg = f"LOG_LEVEL задан некорректно: {self.config.log_level}"
            validation_errors.append(error_msg)
            logger.error(error_msg)

        if self.config.bookmarks_file and os.path.isdir(self.config.bookmarks_file):
            error_msg = f"BOOKMARKS_FILE указывает на директорию: {self.config.bookmarks_file}"
            validation_errors.append(error_msg)
            logger.error(error_msg)

        if validation_errors:
            logger.error(
                f"Валидация конфигурации не пройдена: {len(validation_errors)} ошибок"
            )
            raise ValueError(
                f"Ошибки валидации конфигурации: {'; '.join(validation_errors)}"
            )

        logger.info("Валидация конфигурации успешно пройдена")

    def get(self) -> Config:
        """
        Возвращает объект конфигурации.

        Возвращает:
            Config: Объект с конфигурацией
        """
        return self.config
