"""Tests for shared/repository.py."""

import threading

import pytest
from unittest.mock import MagicMock

from shared.repository import BaseRepository


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_db_client(self):
        """Should store the database client in _db attribute."""
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_generic_type_parameter(self):
        """Should work with generic type parameter."""
        from typing import Optional

        class MockModel:
            pass

        class TestRepository(BaseRepository[MockModel]):
            def get_by_id(self, id: str) -> Optional[MockModel]:
                return None

        mock_db = MagicMock()
        repo = TestRepository(mock_db)
        assert repo._db is mock_db

    @pytest.mark.asyncio
    async def test_run_executes_query(self):
        """_run should return the query result."""
        mock_db = MagicMock()
        mock_db.table.return_value.select.return_value.execute.return_value.data = [
            {"id": "123", "name": "test"}
        ]

        class TestRepository(BaseRepository[dict]):
            async def get_all(self) -> list[dict]:
                result = await self._run(lambda: self._db.table("test").select("*").execute())
                return result.data

        repo = TestRepository(mock_db)
        result = await repo.get_all()

        assert result == [{"id": "123", "name": "test"}]
        mock_db.table.assert_called_once_with("test")

    @pytest.mark.asyncio
    async def test_run_uses_worker_thread(self):
        """Blocking SDK calls should not run on the event loop thread."""
        loop_thread = threading.get_ident()
        repo = BaseRepository(MagicMock())

        ran_on = await repo._run(threading.get_ident)

        assert ran_on != loop_thread

    @pytest.mark.asyncio
    async def test_run_passes_args_and_propagates_errors(self):
        repo = BaseRepository(MagicMock())

        def fail(message):
            raise ValueError(message)

        with pytest.raises(ValueError, match="boom"):
            await repo._run(fail, "boom")
