"""Unit tests for the barrier safety closer."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock, patch
from parking_gate.config import settings
from parking_gate.models.barrier import Barrier, ENTRY_BARRIER, EXIT_BARRIER
from parking_gate.services import barrier_service
from parking_gate.services.barrier_service import handle_barrier_change, update_barrier
from parking_gate.services.change_feed import DocumentChange, BARRIERS


def barrier_change(was_open, is_open, barrier_id=ENTRY_BARRIER):
    return DocumentChange(BARRIERS, barrier_id, {"is_open": was_open}, {"is_open": is_open})


def open_in_store(db, barrier_id=ENTRY_BARRIER):
    db.get(Barrier, barrier_id).is_open = True
    db.commit()


class TestSafetyCloser:
    @pytest.mark.asyncio
    async def test_closes_after_configured_delay(self, db, monkeypatch):
        monkeypatch.setattr(settings, "BARRIER_AUTO_CLOSE_SECONDS", 5)
        open_in_store(db)

        with patch("parking_gate.services.barrier_service.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await handle_barrier_change(barrier_change(False, True), db)

        mock_sleep.assert_awaited_once_with(5)
        db.expire_all()
        assert db.get(Barrier, ENTRY_BARRIER).is_open is False

    @pytest.mark.asyncio
    async def test_open_to_open_does_not_start_timer(self, db):
        open_in_store(db)

        with patch("parking_gate.services.barrier_service.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await handle_barrier_change(barrier_change(True, True), db)

        mock_sleep.assert_not_awaited()
        assert db.get(Barrier, ENTRY_BARRIER).is_open is True

    @pytest.mark.asyncio
    async def test_closing_is_ignored(self, db):
        with patch("parking_gate.services.barrier_service.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await handle_barrier_change(barrier_change(True, False), db)
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_publishes_closed_change(self, db):
        open_in_store(db, EXIT_BARRIER)

        with patch("parking_gate.services.barrier_service.change_feed") as mock_feed:
            await handle_barrier_change(barrier_change(False, True, EXIT_BARRIER), db)

        change = mock_feed.publish.call_args[0][0]
        assert change.document_id == EXIT_BARRIER
        assert change.before == {"is_open": True}
        assert change.after == {"is_open": False}


class TestOperatorOverride:
    @pytest.mark.asyncio
    async def test_manual_open_still_auto_closes(self, db, feed):
        barrier = await update_barrier(EXIT_BARRIER, True, db)
        assert barrier.is_open is True

        await feed.drain()

        db.expire_all()
        assert db.get(Barrier, EXIT_BARRIER).is_open is False

    @pytest.mark.asyncio
    async def test_repeated_open_schedules_one_close(self, db, feed):
        await update_barrier(ENTRY_BARRIER, True, db)

        with patch.object(barrier_service, "set_barrier_state", wraps=barrier_service.set_barrier_state) as spy:
            await update_barrier(ENTRY_BARRIER, True, db)
            await feed.drain()

        closes = [c for c in spy.call_args_list if c.args[2] is False]
        assert len(closes) == 1
