"""Tests for the sync applier."""

import pytest

from dictionary.errors import EngineError
from dictionary.indexing import SyncApplier
from dictionary.models import EntityKind, Menu, Window
from dictionary.retrieval import EntityQueryService, TenantContext


class TestSyncApplier:
    """Tests for event type to index mutation mapping."""

    @pytest.mark.asyncio
    async def test_new_creates(self, mock_gateway) -> None:
        applier = SyncApplier(mock_gateway)
        window = Window(id=143, name="Sales Order", language="en", client_id=11)

        assert await applier.apply("new", window) is True

        mock_gateway.create.assert_awaited_once_with("window_en_11", 143, window.to_body())
        mock_gateway.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_deletes_then_creates(self, mock_gateway) -> None:
        calls: list[str] = []
        mock_gateway.delete.side_effect = lambda *args: calls.append("delete")
        mock_gateway.create.side_effect = lambda *args: calls.append("create")
        applier = SyncApplier(mock_gateway)

        assert await applier.apply("update", Menu(id=1, language="en")) is True

        assert calls == ["delete", "create"]
        mock_gateway.delete.assert_awaited_once_with("menu_en", 1)

    @pytest.mark.asyncio
    async def test_delete(self, mock_gateway) -> None:
        applier = SyncApplier(mock_gateway)

        assert await applier.apply("delete", Menu(id=1)) is True

        mock_gateway.delete.assert_awaited_once_with("menu", 1)
        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_event_is_noop_success(self, mock_gateway) -> None:
        applier = SyncApplier(mock_gateway)

        assert await applier.apply("refresh", Menu(id=1)) is True
        assert await applier.apply("", Menu(id=1)) is True

        mock_gateway.create.assert_not_awaited()
        mock_gateway.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_engine_failure_reports_retry(self, mock_gateway) -> None:
        mock_gateway.create.side_effect = EngineError("unavailable", index="menu")
        applier = SyncApplier(mock_gateway)

        assert await applier.apply("new", Menu(id=1)) is False

    @pytest.mark.asyncio
    async def test_update_create_failure_after_delete(self, mock_gateway) -> None:
        """The delete has already happened when the create fails."""
        mock_gateway.create.side_effect = EngineError("unavailable")
        applier = SyncApplier(mock_gateway)

        assert await applier.apply("update", Menu(id=1)) is False
        mock_gateway.delete.assert_awaited_once()

    def test_target_index_from_document_scope(self, mock_gateway) -> None:
        applier = SyncApplier(mock_gateway)
        menu = Menu.model_validate(
            {
                "id": 1,
                "language": "EN",
                "client_id": 11,
                "role_id": 102,
                "index_value": "something_else",
            }
        )
        assert applier.target_index(menu) == "menu_en_11_102"


class TestAppliedState:
    """Tests for index contents after events are applied."""

    @pytest.mark.asyncio
    async def test_delete_twice_succeeds(self, memory_gateway) -> None:
        applier = SyncApplier(memory_gateway)
        menu = Menu(id=1, name="Sales", language="en")
        await applier.apply("new", menu)

        assert await applier.apply("delete", menu) is True
        assert await applier.apply("delete", menu) is True
        assert await memory_gateway.get("menu_en", 1) is None

    @pytest.mark.asyncio
    async def test_update_replaces_document(self, memory_gateway) -> None:
        applier = SyncApplier(memory_gateway)
        await applier.apply("new", Window(id=143, name="Sales Order", language="en", client_id=11))

        updated = Window(id=143, name="Sales Order (new)", language="en", client_id=11, tabs=[])
        assert await applier.apply("update", updated) is True

        service = EntityQueryService(memory_gateway, EntityKind.WINDOW)
        context = TenantContext(language="en", client_id="11", role_id="102")
        document = await service.get_by_id(143, context)
        assert document is not None
        assert document.to_body() == updated.to_body()
        assert [window.name for window in await service.list(context)] == ["Sales Order (new)"]
