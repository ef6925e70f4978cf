# parking_gate/services/entry_service.py
"""
Entry Coordinator: two-factor entry (app request + physical button).

How it works:
  - request_entry (app, authenticated user) checks the user holds no open ticket and
    that a spot is free, then writes the single entry marker
  - confirm_entry (gate button, no identity) consumes the marker if it is younger
    than CONFIRMATION_WINDOW_SECONDS, creates the ticket with the unresolved spot
    and opens the entry barrier, all in one commit
  - The occupancy sensor later binds the ticket to a spot (spot_assignment_service)

A stale marker is only noticed on the next confirmation, which deletes it.
A second request while one is pending overwrites it (one gate, one button).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.errors import AlreadyActive, NoCapacity
from parking_gate.models.barrier import ENTRY_BARRIER
from parking_gate.models.parking_spot import ParkingSpot
from parking_gate.models.pending_request import PendingRequest, KIND_ENTRY
from parking_gate.models.ticket import Ticket, UNRESOLVED_SPOT, STATUS_ACTIVE, STATUS_PAID
from parking_gate.services.barrier_service import open_barrier
from parking_gate.services.change_feed import TICKETS, DocumentChange, change_feed
from parking_gate.services.pending_service import write_marker, consume_marker
from parking_gate.services.ticket_ids import generate_ticket_id
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)

OPEN_TICKET_STATUSES = (STATUS_ACTIVE, STATUS_PAID)


async def request_entry(user_id: str, db: Session, now: Optional[datetime] = None) -> PendingRequest:
    now = now or datetime.utcnow()

    open_ticket = (
        db.query(Ticket)
        .filter(Ticket.user_id == user_id, Ticket.status.in_(OPEN_TICKET_STATUSES))
        .first()
    )
    if open_ticket:
        logger.info(f"[ENTRY] Rejected user={user_id}: already holds {open_ticket.id} ({open_ticket.status})")
        raise AlreadyActive()

    free_spots = db.query(ParkingSpot).filter(ParkingSpot.occupied == False).count()  # noqa: E712
    if free_spots == 0:
        logger.info(f"[ENTRY] Rejected user={user_id}: lot full")
        raise NoCapacity()

    marker = write_marker(db, KIND_ENTRY, user_id, now)
    logger.info(f"[ENTRY] user={user_id} awaiting physical confirmation ({free_spots} spots free)")
    return marker


async def confirm_entry(db: Session, now: Optional[datetime] = None) -> str:
    """Physical entry button. Returns the new ticket id."""
    now = now or datetime.utcnow()
    marker = consume_marker(db, KIND_ENTRY, now)

    ticket_id = generate_ticket_id(db, now)
    ticket = Ticket(
        id=ticket_id,
        user_id=marker.user_id,
        spot_id=UNRESOLVED_SPOT,
        start_time=now,
        status=STATUS_ACTIVE,
        amount=0,
        qr_code_data=f"{ticket_id}|{marker.user_id}",
    )
    db.add(ticket)
    barrier_change = open_barrier(db, ENTRY_BARRIER, now)
    db.commit()

    change_feed.publish(DocumentChange(TICKETS, ticket_id, None, ticket.snapshot()))
    change_feed.publish(barrier_change)
    logger.info(f"[ENTRY] Confirmed user={marker.user_id} ticket={ticket_id}, entry barrier OPEN")
    return ticket_id
