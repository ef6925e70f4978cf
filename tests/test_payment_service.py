"""Unit tests for the simulated payment and the tariff."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta
from parking_gate.errors import TicketNotFound, TicketNotPayable
from parking_gate.models.ticket import Ticket, STATUS_ACTIVE, STATUS_PAID, STATUS_COMPLETED
from parking_gate.services.payment_service import pay_ticket
from parking_gate.utils.pricing import calculate_price, format_price

T0 = datetime(2025, 5, 10, 9, 0, 0)


class TestPricing:
    @pytest.mark.parametrize("minutes,expected", [
        (0, 0), (10, 6), (30, 6), (31, 10), (60, 10), (90, 18), (120, 18),
        (121, 50), (1440, 50), (25 * 60, 100), (49 * 60, 150),
    ])
    def test_tariff(self, minutes, expected):
        assert calculate_price(T0, T0 + timedelta(minutes=minutes)) == expected

    def test_format(self):
        assert format_price(18.0) == "18 Lei"


class TestPayTicket:
    @pytest.mark.asyncio
    async def test_active_ticket_becomes_paid(self, db):
        db.add(Ticket(id="TKT-2025-137", user_id="alice", spot_id="spot3", start_time=T0, status=STATUS_ACTIVE))
        db.commit()

        ticket = await pay_ticket("TKT-2025-137", "alice", db, now=T0 + timedelta(minutes=45))

        assert ticket.status == STATUS_PAID
        assert ticket.paid_at == T0 + timedelta(minutes=45)
        assert ticket.amount == 10
        assert ticket.end_time is None

    @pytest.mark.asyncio
    async def test_other_users_ticket_is_not_found(self, db):
        db.add(Ticket(id="TKT-2025-137", user_id="alice", spot_id="spot3", start_time=T0, status=STATUS_ACTIVE))
        db.commit()

        with pytest.raises(TicketNotFound):
            await pay_ticket("TKT-2025-137", "mallory", db, now=T0)

    @pytest.mark.asyncio
    async def test_completed_ticket_not_payable(self, db):
        db.add(Ticket(id="TKT-2025-137", user_id="alice", spot_id="spot3", start_time=T0, status=STATUS_COMPLETED))
        db.commit()

        with pytest.raises(TicketNotPayable):
            await pay_ticket("TKT-2025-137", "alice", db, now=T0)
