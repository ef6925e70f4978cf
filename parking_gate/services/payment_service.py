# parking_gate/services/payment_service.py
"""
Simulated payment: no real processor is integrated.
Paying flips an active ticket to paid and stamps paid_at; the consistency rule
then frees the spot, and the exit claim window starts.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.errors import TicketNotFound, TicketNotPayable
from parking_gate.models.ticket import Ticket, STATUS_ACTIVE, STATUS_PAID
from parking_gate.services.change_feed import TICKETS, DocumentChange, change_feed
from parking_gate.utils.pricing import calculate_price, format_price
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


async def pay_ticket(ticket_id: str, user_id: str, db: Session, now: Optional[datetime] = None) -> Ticket:
    now = now or datetime.utcnow()

    ticket = db.get(Ticket, ticket_id)
    if ticket is None or ticket.user_id != user_id:
        raise TicketNotFound(f"Ticket {ticket_id} not found")
    if ticket.status != STATUS_ACTIVE:
        raise TicketNotPayable(f"Ticket {ticket_id} is {ticket.status}")

    before = ticket.snapshot()
    ticket.amount = calculate_price(ticket.start_time, now)
    ticket.status = STATUS_PAID
    ticket.paid_at = now
    db.commit()

    change_feed.publish(DocumentChange(TICKETS, ticket.id, before, ticket.snapshot()))
    logger.info(f"[PAY] ticket={ticket.id} user={user_id} paid {format_price(ticket.amount)}")
    return ticket
