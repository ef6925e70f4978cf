# parking_gate/services/spot_assignment_service.py
"""
Spot Assignment Resolver: the occupancy sensor reports a spot, we bind it to the
active ticket still waiting for one. A ticket paid before the sensor fired is
never bound: only active tickets hold a spot.

Accepts either the bare spot number ("3", 3) or the full id ("spot3").
If several tickets are waiting, the most recently started one wins: the newest
entrant is the car the sensor is seeing.
"""

import re
from dataclasses import dataclass
from typing import Union

from sqlalchemy.orm import Session

from parking_gate.errors import InvalidArgument, UnknownSpot, NoPendingAssignment
from parking_gate.models.parking_spot import ParkingSpot
from parking_gate.models.ticket import Ticket, UNRESOLVED_SPOT, STATUS_ACTIVE
from parking_gate.services.change_feed import TICKETS, DocumentChange, change_feed
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)

_SPOT_PATTERN = re.compile(r"^(?:spot\s*)?(\d{1,4})$", re.IGNORECASE)


@dataclass
class SpotAssignment:
    ticket_id: str
    spot_id: str
    user_id: str


def spot_id_for(number: int) -> str:
    return f"spot{number}"


def normalize_spot_id(raw: Union[str, int]) -> str:
    """'3', 3, 'spot3', 'Spot 3' → 'spot3'."""
    if isinstance(raw, bool) or raw is None:
        raise InvalidArgument("Spot identifier is required")
    match = _SPOT_PATTERN.match(str(raw).strip())
    if not match:
        raise InvalidArgument(f"Invalid spot identifier: {raw!r}")
    return spot_id_for(int(match.group(1)))


async def assign_spot(raw_spot: Union[str, int], db: Session) -> SpotAssignment:
    spot_id = normalize_spot_id(raw_spot)

    spot = db.get(ParkingSpot, spot_id)
    if spot is None:
        logger.warning(f"[SPOT] Sensor reported unknown spot {raw_spot!r}")
        raise UnknownSpot(f"Unknown parking spot: {spot_id}")

    # Paid or closed tickets no longer hold a spot, so they are never bound
    ticket = (
        db.query(Ticket)
        .filter(Ticket.spot_id == UNRESOLVED_SPOT, Ticket.status == STATUS_ACTIVE)
        .order_by(Ticket.start_time.desc())
        .first()
    )
    if ticket is None:
        logger.warning(f"[SPOT] {spot_id} reported but no active ticket awaits a spot")
        raise NoPendingAssignment()

    changes = []
    displaced = (
        db.query(Ticket)
        .filter(Ticket.spot_id == spot_id, Ticket.status == STATUS_ACTIVE, Ticket.id != ticket.id)
        .all()
    )
    for other in displaced:
        # The sensor sees a different car there now; the old ticket waits for its next report
        before = other.snapshot()
        other.spot_id = UNRESOLVED_SPOT
        changes.append(DocumentChange(TICKETS, other.id, before, other.snapshot()))
        logger.warning(f"[SPOT] {spot_id} held by ticket={other.id} (user={other.user_id}), "
                       f"moved back to {UNRESOLVED_SPOT}")

    before = ticket.snapshot()
    ticket.spot_id = spot_id
    spot.occupied = True
    spot.assigned_user_id = ticket.user_id
    db.commit()

    changes.append(DocumentChange(TICKETS, ticket.id, before, ticket.snapshot()))
    for change in changes:
        change_feed.publish(change)
    logger.info(f"[SPOT] ticket={ticket.id} → {spot_id} (user={ticket.user_id})")
    return SpotAssignment(ticket_id=ticket.id, spot_id=spot_id, user_id=ticket.user_id)
