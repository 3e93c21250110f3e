"""Unit tests for the base repository.

CRUD calls are checked against a mocked session; the query helpers are
checked by compiling the statements they build.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlmodel import select

from vibe_creator.core.database.entities import Announcement
from vibe_creator.core.database.repositories import AnnouncementRepository, AsyncQueryBuilder


class TestAsyncBaseRepository:
    """CRUD operations against a mocked session."""

    @pytest.fixture
    def mock_session(self):
        session = AsyncMock()
        session.add = MagicMock()
        return session

    @pytest.fixture
    def repository(self, mock_session):
        return AnnouncementRepository(mock_session)

    @pytest.mark.asyncio
    async def test_create_commits_and_refreshes(self, repository, mock_session):
        entity = Announcement(title="Hi", content="Hello")

        result = await repository.create(entity)

        mock_session.add.assert_called_once_with(entity)
        mock_session.commit.assert_awaited_once()
        mock_session.refresh.assert_awaited_once_with(entity)
        assert result is entity

    @pytest.mark.asyncio
    async def test_get_by_id(self, repository, mock_session):
        mock_session.get.return_value = "found"

        assert await repository.get_by_id("a-1") == "found"
        mock_session.get.assert_awaited_once_with(Announcement, "a-1")

    @pytest.mark.asyncio
    async def test_delete_found(self, repository, mock_session):
        entity = Announcement(title="Hi", content="Hello")
        mock_session.get.return_value = entity

        assert await repository.delete(entity.id) is True
        mock_session.delete.assert_awaited_once_with(entity)
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing(self, repository, mock_session):
        mock_session.get.return_value = None

        assert await repository.delete("missing") is False
        mock_session.delete.assert_not_awaited()
        mock_session.commit.assert_not_awaited()


class TestAsyncQueryBuilder:
    def test_filters_skip_none_and_unknown_fields(self):
        stmt = AsyncQueryBuilder.apply_filters(
            select(Announcement), Announcement, {"is_active": True, "title": None, "nope": 1}
        )

        sql = str(stmt.compile())
        assert "announcements.is_active = " in sql
        assert "announcements.title =" not in sql

    def test_pagination(self):
        stmt = AsyncQueryBuilder.apply_pagination(select(Announcement), 10, 20)

        sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))
        assert "LIMIT 10" in sql
        assert "OFFSET 20" in sql

    def test_no_pagination(self):
        sql = str(AsyncQueryBuilder.apply_pagination(select(Announcement), None, None).compile())

        assert "LIMIT" not in sql


class TestListAndCount:
    @pytest.mark.asyncio
    async def test_list_with_filters(self, session):
        repository = AnnouncementRepository(session)
        await repository.create(Announcement(title="A", content="a"))
        await repository.create(Announcement(title="B", content="b", is_active=False))

        active = await repository.list(filters={"is_active": True})

        assert [a.title for a in active] == ["A"]
        assert await repository.count() == 2
        assert await repository.count({"is_active": False}) == 1
        assert len(await repository.list(limit=1)) == 1
