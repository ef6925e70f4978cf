"""Unit tests for the entry coordinator (request → physical confirm)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import re
import pytest
from unittest.mock import patch
from datetime import datetime, timedelta
from parking_gate.errors import AlreadyActive, NoCapacity, NoPendingRequest, RequestExpired, FailedPrecondition
from parking_gate.models.barrier import Barrier, ENTRY_BARRIER
from parking_gate.models.parking_spot import ParkingSpot
from parking_gate.models.pending_request import PendingRequest, KIND_ENTRY
from parking_gate.models.ticket import Ticket, UNRESOLVED_SPOT, STATUS_ACTIVE, STATUS_PAID
from parking_gate.services.entry_service import request_entry, confirm_entry

T0 = datetime(2025, 5, 10, 9, 0, 0)


def add_ticket(db, ticket_id, user_id, status=STATUS_ACTIVE, spot_id="spot1", start=T0):
    db.add(Ticket(id=ticket_id, user_id=user_id, spot_id=spot_id, start_time=start, status=status, amount=0))
    db.commit()


class TestRequestEntry:
    @pytest.mark.asyncio
    async def test_request_writes_marker(self, db):
        marker = await request_entry("alice", db, now=T0)

        assert marker.user_id == "alice"
        stored = db.get(PendingRequest, KIND_ENTRY)
        assert stored.user_id == "alice"
        assert stored.requested_at == T0

    @pytest.mark.asyncio
    async def test_active_ticket_rejected(self, db):
        add_ticket(db, "TKT-2025-100", "alice")

        with pytest.raises(AlreadyActive) as exc:
            await request_entry("alice", db, now=T0)

        assert isinstance(exc.value, FailedPrecondition)
        assert db.get(PendingRequest, KIND_ENTRY) is None

    @pytest.mark.asyncio
    async def test_paid_ticket_not_yet_exited_rejected(self, db):
        add_ticket(db, "TKT-2025-101", "alice", status=STATUS_PAID)

        with pytest.raises(AlreadyActive):
            await request_entry("alice", db, now=T0)

    @pytest.mark.asyncio
    async def test_full_lot_rejected(self, db):
        db.query(ParkingSpot).update({ParkingSpot.occupied: True})
        db.commit()

        with pytest.raises(NoCapacity):
            await request_entry("alice", db, now=T0)
        assert db.get(PendingRequest, KIND_ENTRY) is None

    @pytest.mark.asyncio
    async def test_second_request_overwrites_first(self, db):
        await request_entry("alice", db, now=T0)
        await request_entry("bob", db, now=T0 + timedelta(seconds=5))

        db.expire_all()
        assert db.query(PendingRequest).count() == 1
        assert db.get(PendingRequest, KIND_ENTRY).user_id == "bob"


class TestConfirmEntry:
    @pytest.mark.asyncio
    async def test_confirm_without_request(self, db):
        with pytest.raises(NoPendingRequest):
            await confirm_entry(db, now=T0)
        assert db.query(Ticket).count() == 0

    @pytest.mark.asyncio
    async def test_confirm_within_window_creates_one_ticket(self, db):
        await request_entry("alice", db, now=T0)

        ticket_id = await confirm_entry(db, now=T0 + timedelta(seconds=10))

        assert re.fullmatch(r"TKT-2025-\d{3}", ticket_id)
        tickets = db.query(Ticket).all()
        assert len(tickets) == 1
        ticket = tickets[0]
        assert ticket.id == ticket_id
        assert ticket.user_id == "alice"
        assert ticket.status == STATUS_ACTIVE
        assert ticket.spot_id == UNRESOLVED_SPOT
        assert ticket.start_time == T0 + timedelta(seconds=10)
        assert db.get(PendingRequest, KIND_ENTRY) is None

        barrier = db.get(Barrier, ENTRY_BARRIER)
        assert barrier.is_open is True
        assert barrier.last_opened_at == T0 + timedelta(seconds=10)

    @pytest.mark.asyncio
    async def test_confirm_after_window_expires_marker(self, db):
        await request_entry("alice", db, now=T0)

        with pytest.raises(RequestExpired):
            await confirm_entry(db, now=T0 + timedelta(seconds=61))

        assert db.get(PendingRequest, KIND_ENTRY) is None
        assert db.query(Ticket).count() == 0
        with pytest.raises(NoPendingRequest):
            await confirm_entry(db, now=T0 + timedelta(seconds=62))

    @pytest.mark.asyncio
    async def test_confirm_at_window_edge_still_accepted(self, db):
        await request_entry("alice", db, now=T0)
        await confirm_entry(db, now=T0 + timedelta(seconds=60))
        assert db.query(Ticket).count() == 1

    @pytest.mark.asyncio
    async def test_repeated_button_press_does_not_duplicate(self, db):
        await request_entry("alice", db, now=T0)
        await confirm_entry(db, now=T0 + timedelta(seconds=3))

        with pytest.raises(NoPendingRequest):
            await confirm_entry(db, now=T0 + timedelta(seconds=4))
        assert db.query(Ticket).count() == 1

    @pytest.mark.asyncio
    async def test_confirm_publishes_ticket_and_barrier_changes(self, db):
        await request_entry("alice", db, now=T0)

        with patch("parking_gate.services.entry_service.change_feed") as mock_feed:
            ticket_id = await confirm_entry(db, now=T0 + timedelta(seconds=1))

        changes = [c.args[0] for c in mock_feed.publish.call_args_list]
        assert [(c.collection, c.document_id) for c in changes] == [
            ("parking_tickets", ticket_id),
            ("barriers", ENTRY_BARRIER),
        ]
        assert changes[0].before is None
        assert changes[1].before == {"is_open": False}
        assert changes[1].after == {"is_open": True}
