# parking_gate/services/exit_service.py
"""
Exit Coordinator: mirrors the entry flow for paid tickets.

How it works:
  - request_exit (app) finds the user's paid ticket and writes the single exit marker.
    A ticket paid longer than EXIT_CLAIM_WINDOW_MINUTES ago is expired instead.
  - confirm_exit (gate button) consumes the marker within the confirmation window,
    re-checks the claim deadline, then completes the ticket and opens the exit barrier
  - expire_unclaimed_tickets runs periodically and expires paid tickets nobody drove out with
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.errors import NoPaidTicket, ClaimWindowExpired
from parking_gate.models.barrier import EXIT_BARRIER
from parking_gate.models.pending_request import PendingRequest, KIND_EXIT
from parking_gate.models.ticket import Ticket, STATUS_PAID, STATUS_COMPLETED, STATUS_EXPIRED
from parking_gate.services.barrier_service import open_barrier
from parking_gate.services.change_feed import TICKETS, DocumentChange, change_feed
from parking_gate.services.pending_service import write_marker, consume_marker
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


def _claim_deadline(ticket: Ticket) -> Optional[datetime]:
    if ticket.paid_at is None:
        return None
    return ticket.paid_at + timedelta(minutes=settings.EXIT_CLAIM_WINDOW_MINUTES)


def _expire(ticket: Ticket) -> DocumentChange:
    before = ticket.snapshot()
    ticket.status = STATUS_EXPIRED
    return DocumentChange(TICKETS, ticket.id, before, ticket.snapshot())


async def request_exit(user_id: str, db: Session, now: Optional[datetime] = None) -> PendingRequest:
    now = now or datetime.utcnow()

    ticket = (
        db.query(Ticket)
        .filter(Ticket.user_id == user_id, Ticket.status == STATUS_PAID)
        .order_by(Ticket.paid_at.desc())
        .first()
    )
    if ticket is None:
        logger.info(f"[EXIT] Rejected user={user_id}: no paid ticket")
        raise NoPaidTicket()

    deadline = _claim_deadline(ticket)
    if deadline is not None and now > deadline:
        change = _expire(ticket)
        db.commit()
        change_feed.publish(change)
        logger.info(f"[EXIT] ticket={ticket.id} paid at {ticket.paid_at} not claimed in time, EXPIRED")
        raise ClaimWindowExpired()

    marker = write_marker(db, KIND_EXIT, user_id, now, ticket_id=ticket.id)
    logger.info(f"[EXIT] user={user_id} ticket={ticket.id} awaiting physical confirmation")
    return marker


async def confirm_exit(db: Session, now: Optional[datetime] = None) -> str:
    """Physical exit button. Returns the completed ticket id."""
    now = now or datetime.utcnow()
    marker = consume_marker(db, KIND_EXIT, now)

    ticket = db.get(Ticket, marker.ticket_id) if marker.ticket_id else None
    if ticket is None or ticket.status != STATUS_PAID:
        # Marker is gone either way; the user has to request again
        db.commit()
        logger.warning(f"[EXIT] ticket={marker.ticket_id} no longer paid "
                       f"({ticket.status if ticket else 'missing'})")
        raise NoPaidTicket()

    deadline = _claim_deadline(ticket)
    if deadline is not None and now > deadline:
        change = _expire(ticket)
        db.commit()
        change_feed.publish(change)
        logger.info(f"[EXIT] ticket={ticket.id} confirmed after its claim window, EXPIRED")
        raise ClaimWindowExpired()

    before = ticket.snapshot()
    ticket.status = STATUS_COMPLETED
    ticket.end_time = now
    barrier_change = open_barrier(db, EXIT_BARRIER, now)
    db.commit()

    change_feed.publish(DocumentChange(TICKETS, ticket.id, before, ticket.snapshot()))
    change_feed.publish(barrier_change)
    logger.info(f"[EXIT] Confirmed user={marker.user_id} ticket={ticket.id} COMPLETED, exit barrier OPEN")
    return ticket.id


async def expire_unclaimed_tickets(db: Session, now: Optional[datetime] = None) -> int:
    """Expire paid tickets past the claim window. Returns how many were expired."""
    now = now or datetime.utcnow()
    cutoff = now - timedelta(minutes=settings.EXIT_CLAIM_WINDOW_MINUTES)
    stale = (
        db.query(Ticket)
        .filter(Ticket.status == STATUS_PAID, Ticket.paid_at < cutoff)
        .all()
    )
    if not stale:
        return 0

    changes = [_expire(t) for t in stale]
    db.commit()
    for change in changes:
        change_feed.publish(change)
    logger.info(f"[EXIT] Expired {len(changes)} unclaimed paid ticket(s)")
    return len(changes)
