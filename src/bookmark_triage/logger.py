"""
Модуль logger.py
Логирование сеанса разбора закладок.

Каждая запись помечается именем файла закладок, с которым идет работа,
чтобы в общем файле лога можно было отделить сеансы над разными профилями.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(session)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Ротация по размеру (10 МБ), 5 резервных копий
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class SessionFilter(logging.Filter):
    """
    Добавляет в каждую запись поле session с именем файла закладок.

    Фильтр ставится на обработчики, а не на логгеры, поэтому метку
    получают записи всех модулей, включая сторонние библиотеки.
    """

    def __init__(self, session: str):
        super().__init__()
        self.session = session

    def filter(self, record: logging.LogRecord) -> bool:
        record.session = self.session
        return True


def session_name(config: 'Config') -> str:
    """
    Метка сеанса: имя файла закладок или '-' до его поиска в профиле.
    """
    if not config.bookmarks_file:
        return "-"
    return Path(config.bookmarks_file).name


def _create_file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    return logging.handlers.RotatingFileHandler(
        filename=log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8'
    )


def get_logger(name: str) -> logging.Logger:
    """
    Получает логгер для указанного модуля.

    Пример:
        >>> from bookmark_triage.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Сообщение на русском языке")
    """
    return logging.getLogger(name)


def setup_logging(config: 'Config', session: Optional[str] = None) -> None:
    """
    Настраивает корневой логгер для сеанса разбора.

    Повторный вызов заменяет обработчики, так что после того, как файл
    закладок найден в профиле, метку сеанса можно уточнить.

    Аргументы:
        config: Объект конфигурации приложения
        session: Метка сеанса (по умолчанию имя файла закладок из конфигурации)
    """
    session = session or session_name(config)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    session_filter = SessionFilter(session)

    # stdout занят интерфейсом разбора, поэтому консольный лог идет в stderr
    handlers = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(_create_file_handler(config.log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(session_filter)
        root_logger.addHandler(handler)

    logger = get_logger(__name__)
    logger.info(f"Логирование настроено с уровнем: {config.log_level}")
    logger.debug(f"Файл лога: {config.log_file or 'не задан'}, формат закладок: {config.bookmarks_format}")


def log_function_call(func_name: str, args: tuple = (), kwargs: Optional[dict] = None) -> None:
    """
    Логирует вызов функции с аргументами в DEBUG режиме.

    Аргументы:
        func_name: Имя функции
        args: Позиционные аргументы
        kwargs: Именованные аргументы
    """
    logger = get_logger(__name__)

    if logger.isEnabledFor(logging.DEBUG):
        all_args = [str(arg) for arg in args]
        all_args.extend(f"{k}={v}" for k, v in (kwargs or {}).items())
        logger.debug(f"Вызов функции: {func_name}({', '.join(all_args)})")


def log_performance(func_name: str, duration: float, details: str = "") -> None:
    """Логирует длительность операции в секундах."""
    logger = get_logger(__name__)

    details_str = f" ({details})" if details else ""
    logger.info(f"Производительность: {func_name} выполнена за {duration:.2f}с{details_str}")


def log_error_with_context(error: Exception, context: Dict[str, Any]) -> None:
    """
    Логирует ошибку с контекстной информацией.

    Аргументы:
        error: Исключение
        context: Контекстная информация (файл, идентификатор закладки и т.д.)

    Пример:
        >>> try:
        ...     ...
        ... except OSError as e:
        ...     log_error_with_context(e, {"file_path": "Bookmarks", "operation": "read"})
    """
    logger = get_logger(__name__)

    context_str = ", ".join(f"{k}={v}" for k, v in context.items())
    logger.error(f"Ошибка: {type(error).__name__}: {error} | Контекст: {context_str}")
