"""
Общие фикстуры для тестов.
Содержит вспомогательные функции и фикстуры для создания тестовых данных.
"""
import json
import shutil
import tempfile
from pathlib import Path

import pytest

from bookmark_triage.config import ConfigManager
from bookmark_triage.models import BookmarkNode

CONFIG_KEYS = [
    "BOOKMARKS_FILE", "BOOKMARKS_FORMAT", "BACKUP_BEFORE_WRITE",
    "CONFIRM_DELETE", "RANDOM_SEED", "LOG_LEVEL", "LOG_FILE",
]


@pytest.fixture
def temp_dir():
    """Создает временную директорию для тестов."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def clean_env(monkeypatch):
    """Убирает переменные конфигурации и восстанавливает их после теста."""
    for key in CONFIG_KEYS:
        # setenv запоминает исходное значение, чтобы после теста его вернуть
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def chrome_bookmarks_data():
    """Возвращает файл Bookmarks Chrome с вложенными папками."""
    return {
        "checksum": "0123456789abcdef",
        "roots": {
            "bookmark_bar": {
                "children": [
                    {
                        "children": [
                            {
                                "id": "4",
                                "name": "Site1",
                                "type": "url",
                                "url": "https://site1.example.com/"
                            },
                            {
                                "children": [
                                    {
                                        "id": "6",
                                        "name": "Site2",
                                        "type": "url",
                                        "url": "https://site2.example.com/"
                                    }
                                ],
                                "id": "5",
                                "name": "Sub",
                                "type": "folder"
                            }
                        ],
                        "id": "3",
                        "name": "Work",
                        "type": "folder"
                    },
                    {
                        "id": "7",
                        "name": "Top",
                        "type": "url",
                        "url": "https://top.example.com/"
                    }
                ],
                "id": "1",
                "name": "Bookmarks bar",
                "type": "folder"
            },
            "other": {
                "children": [
                    {
                        "children": [],
                        "id": "9",
                        "name": "Empty",
                        "type": "folder"
                    }
                ],
                "id": "8",
                "name": "Other bookmarks",
                "type": "folder"
            },
            "synced": {
                "children": [],
                "id": "10",
                "name": "Mobile bookmarks",
                "type": "folder"
            }
        },
        "version": 1
    }


@pytest.fixture
def firefox_bookmarks_data():
    """Возвращает JSON-резервную копию закладок Firefox."""
    return {
        "guid": "root________",
        "title": "",
        "id": 1,
        "typeCode": 2,
        "type": "text/x-moz-place-container",
        "root": "placesRoot",
        "children": [
            {
                "guid": "menu________",
                "title": "menu",
                "id": 2,
                "typeCode": 2,
                "type": "text/x-moz-place-container",
                "root": "bookmarksMenuFolder",
                "children": [
                    {
                        "guid": "bm_mozilla__",
                        "title": "Mozilla",
                        "id": 10,
                        "typeCode": 1,
                        "type": "text/x-moz-place",
                        "uri": "https://www.mozilla.org/"
                    },
                    {
                        "guid": "separator___",
                        "title": "",
                        "id": 11,
                        "typeCode": 3,
                        "type": "text/x-moz-place-separator"
                    }
                ]
            },
            {
                "guid": "toolbar_____",
                "title": "toolbar",
                "id": 3,
                "typeCode": 2,
                "type": "text/x-moz-place-container",
                "root": "bookmarksToolbarFolder",
                "children": [
                    {
                        "guid": "folder_news_",
                        "title": "News",
                        "id": 12,
                        "typeCode": 2,
                        "type": "text/x-moz-place-container",
                        "children": [
                            {
                                "guid": "bm_example__",
                                "title": "Example",
                                "id": 13,
                                "typeCode": 1,
                                "type": "text/x-moz-place",
                                "uri": "https://example.com/"
                            }
                        ]
                    }
                ]
            },
            {
                "guid": "unfiled_____",
                "title": "unfiled",
                "id": 5,
                "typeCode": 2,
                "type": "text/x-moz-place-container",
                "root": "unfiledBookmarksFolder",
                "children": []
            }
        ]
    }


@pytest.fixture
def chrome_bookmarks_file(temp_dir, chrome_bookmarks_data):
    """Создает тестовый файл Bookmarks Chrome."""
    bookmarks_file = temp_dir / "Bookmarks"
    with open(bookmarks_file, 'w', encoding='utf-8') as f:
        json.dump(chrome_bookmarks_data, f)

    return str(bookmarks_file)


@pytest.fixture
def firefox_bookmarks_file(temp_dir, firefox_bookmarks_data):
    """Создает тестовый файл резервной копии Firefox."""
    bookmarks_file = temp_dir / "bookmarks-2024-01-01.json"
    with open(bookmarks_file, 'w', encoding='utf-8') as f:
        json.dump(firefox_bookmarks_data, f)

    return str(bookmarks_file)


@pytest.fixture
def sample_config(temp_dir, clean_env, chrome_bookmarks_file):
    """Создает тестовый .env файл."""
    config_file = temp_dir / ".env"
    with open(config_file, 'w', encoding='utf-8') as f:
        f.write(f"""
BOOKMARKS_FILE={chrome_bookmarks_file}
BOOKMARKS_FORMAT=chrome
BACKUP_BEFORE_WRITE=true
CONFIRM_DELETE=false
RANDOM_SEED=7
LOG_LEVEL=INFO
LOG_FILE={temp_dir}/test.log
""")

    return str(config_file)


@pytest.fixture
def config(sample_config):
    """Возвращает объект конфигурации."""
    return ConfigManager(sample_config).get()


def create_bookmark(node_id, title="Test Bookmark", url="https://example.com"):
    """Создает узел-закладку."""
    return BookmarkNode(id=node_id, type="bookmark", title=title, url=url)


def create_folder(node_id, title="Test Folder", children=None):
    """Создает узел-папку."""
    return BookmarkNode(id=node_id, type="folder", title=title, children=children or [])


def create_work_tree():
    """Дерево: корень -> Work -> [Site1, Sub -> [Site2]]."""
    return create_folder("0", None, [
        create_folder("1", "Work", [
            create_bookmark("a", "Site1", "https://site1.example.com/"),
            create_folder("2", "Sub", [
                create_bookmark("b", "Site2", "https://site2.example.com/"),
            ]),
        ]),
    ])
