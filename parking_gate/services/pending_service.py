# parking_gate/services/pending_service.py
"""
Pending request markers shared by the entry and exit coordinators.
One slot per kind. Writing replaces whatever is there; consuming deletes it.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.errors import NoPendingRequest, RequestExpired
from parking_gate.models.pending_request import PendingRequest
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


def write_marker(db: Session, kind: str, user_id: str, now: datetime,
                 ticket_id: Optional[str] = None) -> PendingRequest:
    """Create or overwrite the marker of this kind and commit."""
    previous = db.get(PendingRequest, kind)
    if previous and previous.user_id != user_id:
        logger.warning(f"[{kind.upper()}] Pending request of user={previous.user_id} overwritten by user={user_id}")

    marker = db.merge(PendingRequest(kind=kind, user_id=user_id, ticket_id=ticket_id, requested_at=now))
    db.commit()
    return marker


def consume_marker(db: Session, kind: str, now: datetime) -> PendingRequest:
    """
    Load and delete the marker of this kind, leaving the delete uncommitted for the caller.
    The delete is conditional on the marker's timestamp, so of two concurrent button
    presses only one consumes it. An expired marker is deleted and committed here.
    """
    marker = db.get(PendingRequest, kind)
    if marker is None:
        raise NoPendingRequest()

    user_id, ticket_id, requested_at = marker.user_id, marker.ticket_id, marker.requested_at
    elapsed = (now - requested_at).total_seconds()
    if elapsed > settings.CONFIRMATION_WINDOW_SECONDS:
        db.delete(marker)
        db.commit()
        logger.info(f"[{kind.upper()}] Request of user={user_id} expired after {int(elapsed)}s")
        raise RequestExpired()

    db.expunge(marker)
    consumed = (
        db.query(PendingRequest)
        .filter(PendingRequest.kind == kind, PendingRequest.requested_at == requested_at)
        .delete(synchronize_session=False)
    )
    if consumed == 0:
        db.rollback()
        raise NoPendingRequest()
    return PendingRequest(kind=kind, user_id=user_id, ticket_id=ticket_id, requested_at=requested_at)


def pending_markers(db: Session, now: Optional[datetime] = None) -> dict:
    """Outstanding markers with their age in seconds, keyed by kind."""
    now = now or datetime.utcnow()
    return {
        m.kind: {"user_id": m.user_id, "ticket_id": m.ticket_id,
                 "age_seconds": int((now - m.requested_at).total_seconds())}
        for m in db.query(PendingRequest).all()
    }
