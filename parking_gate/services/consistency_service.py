# parking_gate/services/consistency_service.py
"""
Spot/Ticket consistency rule: keeps ParkingSpot.occupied in step with ticket status.

  → active           : spot occupied, assigned to the ticket owner
  → paid | completed : spot freed (only when coming from outside paid/completed)

Only status *changes* count. Tickets still on the unresolved spot are skipped;
the resolver marks the spot itself once the sensor fires. A spot already in the
target state is left alone, so a redelivered change writes nothing.
"""

from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.models.parking_spot import ParkingSpot
from parking_gate.models.ticket import UNRESOLVED_SPOT, STATUS_ACTIVE, STATUS_PAID, STATUS_COMPLETED
from parking_gate.services.change_feed import DocumentChange
from parking_gate.utils.retry import retry_write
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)

RELEASING_STATUSES = {STATUS_PAID, STATUS_COMPLETED}


def _status(snapshot: Optional[dict]) -> Optional[str]:
    return snapshot.get("status") if snapshot else None


def target_spot_state(before_status: Optional[str], after_status: Optional[str]) -> Optional[bool]:
    """True = occupy, False = free, None = no action."""
    if after_status == before_status:
        return None
    if after_status == STATUS_ACTIVE:
        return True
    if after_status in RELEASING_STATUSES and before_status not in RELEASING_STATUSES:
        return False
    return None


async def handle_ticket_change(change: DocumentChange, db: Session) -> bool:
    """Subscribed to the parking_tickets collection. Returns True if the spot was written."""
    if change.after is None:
        return False
    occupy = target_spot_state(_status(change.before), _status(change.after))
    if occupy is None:
        return False

    spot_id = change.after.get("spot_id")
    if not spot_id or spot_id == UNRESOLVED_SPOT:
        logger.debug(f"[SYNC] ticket={change.document_id} has no spot yet, skipped")
        return False

    owner = change.after.get("user_id")
    user_id = owner if occupy else None

    def sync():
        spot = db.get(ParkingSpot, spot_id)
        if spot is None:
            logger.warning(f"[SYNC] ticket={change.document_id} references unknown {spot_id}")
            return False
        if not occupy and spot.assigned_user_id not in (None, owner):
            # Spot was reassigned to another car; only its holder may free it
            logger.warning(f"[SYNC] {spot_id} now held by user={spot.assigned_user_id}, "
                           f"not freed for ticket={change.document_id}")
            return False
        if spot.occupied == occupy and spot.assigned_user_id == user_id:
            return False
        spot.occupied = occupy
        spot.assigned_user_id = user_id
        return True

    written = await retry_write(db, sync, label=f"[SYNC] {spot_id} for ticket={change.document_id}")
    if written:
        logger.info(f"[SYNC] {spot_id} {'OCCUPIED' if occupy else 'FREE'} "
                    f"(ticket={change.document_id} {_status(change.before)}→{_status(change.after)})")
    return bool(written)
