"""
Тесты для модуля background.py
"""
import json
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from bookmark_triage.background import RANDOM_BOOKMARK, TriageController
from bookmark_triage.collector import BookmarkCollection
from bookmark_triage.store import BookmarkStore, BookmarkStoreError
from tests.conftest import create_work_tree


@pytest.fixture
def mock_store():
    store = MagicMock(spec=BookmarkStore)
    store.get_bookmark_tree = AsyncMock(return_value=create_work_tree())
    store.remove_bookmark = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_tabs():
    return MagicMock()


@pytest.fixture
def controller(mock_store, mock_tabs):
    return TriageController(mock_store, mock_tabs, BookmarkCollection(rng=random.Random(0)))


class TestTriageController:
    """Тесты обработки сообщений"""

    @pytest.mark.asyncio
    async def test_collect_returns_random_bookmark(self, controller, mock_store):
        response = await controller.handle_message({"message": "collect"})

        assert response["message"] == RANDOM_BOOKMARK
        assert response["bookmark"]["id"] in ("a", "b")
        assert set(response["bookmark"]) == {"id", "title", "url", "path"}
        mock_store.get_bookmark_tree.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_skip_never_repeats(self, controller):
        response = await controller.handle_message({"message": "collect"})
        first = response["bookmark"]["id"]

        response = await controller.handle_message({"message": "skip"})

        assert response["bookmark"]["id"] != first

    @pytest.mark.asyncio
    async def test_delete_removes_from_store_and_list(self, controller, mock_store):
        await controller.handle_message({"message": "collect"})

        response = await controller.handle_message({"message": "delete", "id": "a"})

        mock_store.remove_bookmark.assert_awaited_once_with("a")
        assert "a" not in controller.collection
        assert response["bookmark"]["id"] == "b"

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_bookmark(self, controller, mock_store):
        mock_store.remove_bookmark = AsyncMock(side_effect=BookmarkStoreError("disk full"))
        await controller.handle_message({"message": "collect"})

        response = await controller.handle_message({"message": "delete", "id": "a"})

        assert response["message"] == RANDOM_BOOKMARK
        assert response["bookmark"]["id"] == "a"
        assert "a" in controller.collection
        assert len(controller.collection) == 2

    @pytest.mark.asyncio
    async def test_failed_delete_of_unknown_id_moves_on(self, controller, mock_store):
        mock_store.remove_bookmark = AsyncMock(side_effect=ValueError("broken JSON"))
        await controller.handle_message({"message": "collect"})

        response = await controller.handle_message({"message": "delete", "id": "zzz"})

        assert response["bookmark"]["id"] in ("a", "b")

    @pytest.mark.asyncio
    async def test_keep_only_removes_from_list(self, controller, mock_store):
        await controller.handle_message({"message": "collect"})

        response = await controller.handle_message({"message": "keep", "id": "b"})

        mock_store.remove_bookmark.assert_not_awaited()
        assert response["bookmark"]["id"] == "a"
        assert len(controller.collection) == 1

    @pytest.mark.asyncio
    async def test_nothing_left(self, controller):
        await controller.handle_message({"message": "collect"})
        await controller.handle_message({"message": "keep", "id": "a"})

        response = await controller.handle_message({"message": "keep", "id": "b"})

        assert response is None

    @pytest.mark.asyncio
    async def test_open_bookmark(self, controller, mock_tabs):
        await controller.handle_message({"message": "collect"})

        response = await controller.handle_message({"message": "open", "id": "b"})

        assert response is None
        mock_tabs.open_tab.assert_called_once_with("https://site2.example.com/")

    @pytest.mark.asyncio
    async def test_open_unknown_bookmark(self, controller, mock_tabs):
        await controller.handle_message({"message": "collect"})

        assert await controller.handle_message({"message": "open", "id": "zzz"}) is None
        mock_tabs.open_tab.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_id(self, controller):
        await controller.handle_message({"message": "collect"})

        with pytest.raises(ValueError):
            await controller.handle_message({"message": "delete"})

    @pytest.mark.asyncio
    async def test_unknown_message_is_ignored(self, controller):
        assert await controller.handle_message({"message": "dance"}) is None

    @pytest.mark.asyncio
    async def test_recollect_from_file(self, chrome_bookmarks_file):
        """Удаленная закладка не появляется после повторного сбора"""
        store = BookmarkStore(chrome_bookmarks_file, backup=False)
        controller = TriageController(store, MagicMock(), BookmarkCollection(rng=random.Random(1)))

        await controller.handle_message({"message": "collect"})
        await controller.handle_message({"message": "delete", "id": "7"})
        await controller.handle_message({"message": "collect"})

        assert [b.id for b in controller.collection] == ["4", "6"]
        with open(chrome_bookmarks_file, encoding="utf-8") as f:
            assert '"7"' not in json.dumps(json.load(f)["roots"]["bookmark_bar"])
