"""
Unit Tests for the read retry decorator
"""
from unittest.mock import AsyncMock
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from src.utils.db_retry import retry_read_once


class FakeRepository:
    """Repository with a scripted sequence of outcomes"""

    def __init__(self, outcomes):
        self.session = AsyncMock()
        self.outcomes = list(outcomes)
        self.calls = 0

    @retry_read_once
    async def read(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _operational_error():
    return OperationalError('SELECT 1', {}, Exception('server closed the connection'))


class TestRetryReadOnce:

    @pytest.mark.asyncio
    async def test_success_without_retry(self):
        repo = FakeRepository(['ok'])

        assert await repo.read() == 'ok'
        assert repo.calls == 1
        repo.session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transient_error_retried_once(self):
        repo = FakeRepository([_operational_error(), 'ok'])

        assert await repo.read() == 'ok'
        assert repo.calls == 2
        repo.session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_second_failure_propagates(self):
        repo = FakeRepository([_operational_error(), _operational_error()])

        with pytest.raises(OperationalError):
            await repo.read()
        assert repo.calls == 2

    @pytest.mark.asyncio
    async def test_non_transient_error_not_retried(self):
        repo = FakeRepository([IntegrityError('INSERT', {}, Exception('unique')), 'ok'])

        with pytest.raises(IntegrityError):
            await repo.read()
        assert repo.calls == 1
