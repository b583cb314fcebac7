"""
Модуль main.py
Главный модуль приложения, связывающий хранилище закладок,
обработчик сообщений и консольный интерфейс.
Обрабатывает аргументы командной строки и запускает сеанс разбора.
"""

import argparse
import asyncio
import random
import sys
import time
from pathlib import Path
from typing import List, Optional

from .background import TriageController
from .collector import BookmarkCollection
from .config import Config, ConfigManager
from .logger import (
    get_logger,
    log_error_with_context,
    log_function_call,
    log_performance,
    setup_logging,
)
from .store import BookmarkStore, BookmarkStoreError, BrowserTabs, find_default_bookmarks_file
from .ui import ConsoleUI

# Настройка логера для модуля
logger = get_logger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Парсит аргументы командной строки.

    Аргументы:
        argv: Список аргументов (по умолчанию sys.argv[1:])

    Возвращает:
        argparse.Namespace: Объект с аргументами командной строки
    """
    parser = argparse.ArgumentParser(
        description="Разбор закладок браузера по одной: оставить, удалить, открыть или пропустить",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:
  bookmark_triage ~/.config/google-chrome/Default/Bookmarks
  bookmark_triage bookmarks-2024-01-01.json --format firefox
  bookmark_triage --seed 42 --no-confirm --verbose
        """,
    )

    parser.add_argument(
        "bookmarks_file",
        nargs="?",
        help="Путь к файлу закладок (по умолчанию BOOKMARKS_FILE из .env или профиль Chrome)",
    )

    parser.add_argument(
        "--config", dest="config_path", help="Путь к .env файлу (по умолчанию: .env)"
    )

    parser.add_argument(
        "--format",
        dest="bookmarks_format",
        choices=["auto", "chrome", "firefox"],
        help="Формат файла закладок (переопределяет BOOKMARKS_FORMAT)",
    )

    parser.add_argument(
        "--seed", type=int, help="Зерно генератора случайных чисел (переопределяет RANDOM_SEED)"
    )

    parser.add_argument(
        "--no-confirm", action="store_true", help="Удалять закладки без подтверждения"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Подробное логирование (DEBUG уровень)",
    )

    args = parser.parse_args(argv)
    logger.debug(f"Аргументы командной строки разобраны: {vars(args)}")

    return args


def apply_overrides(args: argparse.Namespace, config: Config) -> Config:
    """
    Применяет к конфигурации переопределения из командной строки.

    Аргументы:
        args: Аргументы командной строки
        config: Объект конфигурации

    Возвращает:
        Config: Та же конфигурация
    """
    if args.bookmarks_file:
        config.bookmarks_file = args.bookmarks_file
    if args.bookmarks_format:
        config.bookmarks_format = args.bookmarks_format
    if args.seed is not None:
        config.random_seed = args.seed
    if args.no_confirm:
        config.confirm_delete = False
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def resolve_bookmarks_file(config: Config) -> Path:
    """
    Определяет файл закладок: из конфигурации или из профиля браузера.

    Raises:
        FileNotFoundError: Если файл не задан и не найден, или не существует
    """
    if config.bookmarks_file:
        bookmarks_file = Path(config.bookmarks_file).expanduser()
    else:
        bookmarks_file = find_default_bookmarks_file()
        if bookmarks_file is None:
            raise FileNotFoundError(
                "Файл закладок не указан и не найден в стандартных профилях браузера"
            )

    if not bookmarks_file.exists():
        raise FileNotFoundError(f"Файл закладок не найден: {bookmarks_file}")

    return bookmarks_file


def create_controller(config: Config, bookmarks_file: Path) -> TriageController:
    """Создает обработчик сообщений для файла закладок."""
    store = BookmarkStore(
        str(bookmarks_file),
        fmt=config.bookmarks_format,
        backup=config.backup_before_write,
    )
    collection = BookmarkCollection(rng=random.Random(config.random_seed))
    return TriageController(store, BrowserTabs(), collection)


async def run_session(controller: TriageController, ui: ConsoleUI, confirm_delete: bool = True) -> int:
    """
    Проводит сеанс разбора: сбор закладок и цикл показа.

    Аргументы:
        controller: Обработчик сообщений
        ui: Консольный интерфейс
        confirm_delete: Спрашивать подтверждение перед удалением

    Возвращает:
        int: Количество разобранных (оставленных или удаленных) закладок
    """
    log_function_call("run_session", (), {"confirm_delete": confirm_delete})

    triaged = 0
    response = await controller.handle_message({"message": "collect"})

    while response is not None:
        bookmark = response["bookmark"]
        ui.present_bookmark(bookmark, remaining=len(controller.collection))

        action = ui.ask_action()
        if action == "quit":
            logger.info(f"Сеанс завершен пользователем, разобрано: {triaged}")
            return triaged

        if action == "open":
            await controller.handle_message({"message": "open", "id": bookmark["id"]})
            continue

        if action == "delete" and confirm_delete and not ui.confirm_delete(bookmark):
            continue

        response = await controller.handle_message({"message": action, "id": bookmark["id"]})

        # Неудачное удаление оставляет закладку в списке
        if action in ("delete", "keep") and bookmark["id"] not in controller.collection:
            triaged += 1

    ui.show_message("Закладок для разбора не осталось.")
    logger.info(f"Все закладки разобраны, разобрано: {triaged}")
    return triaged


def main(argv: Optional[List[str]] = None) -> None:
    """
    Главная функция приложения.
    """
    start_time = time.time()
    args = parse_arguments(argv)

    try:
        config = apply_overrides(args, ConfigManager(args.config_path).get())
        setup_logging(config)

        bookmarks_file = resolve_bookmarks_file(config)
        if not config.bookmarks_file:
            # Файл найден в профиле браузера, уточняем метку сеанса
            setup_logging(config, session=bookmarks_file.name)
        logger.info("Запуск разбора закладок")
        logger.info(f"Файл закладок: {bookmarks_file}")
        logger.info(f"Формат: {config.bookmarks_format}")

        controller = create_controller(config, bookmarks_file)
        ui = ConsoleUI()
        triaged = asyncio.run(run_session(controller, ui, config.confirm_delete))

        log_performance("main", time.time() - start_time, f"triaged={triaged}")

    except KeyboardInterrupt:
        logger.info("Программа прервана пользователем")
        sys.exit(1)
    except (ValueError, FileNotFoundError, BookmarkStoreError) as e:
        log_error_with_context(e, {"operation": "main"})
        sys.exit(1)


if __name__ == "__main__":
    main()
