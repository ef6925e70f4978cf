# parking_gate/services/barrier_service.py
"""
Barrier state changes + the safety closer.

Coordinators open a barrier as part of their own transaction via open_barrier().
The safety closer reacts to every closed → open transition, whatever caused it,
and forces the barrier shut BARRIER_AUTO_CLOSE_SECONDS later.
open → open writes are ignored, so a repeated open never starts a second timer.
"""

import asyncio
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.models.barrier import Barrier, ENTRY_BARRIER, EXIT_BARRIER
from parking_gate.services.change_feed import BARRIERS, DocumentChange, change_feed
from parking_gate.utils.retry import retry_write
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)

BARRIER_NAMES = {ENTRY_BARRIER: "Entry barrier", EXIT_BARRIER: "Exit barrier"}


def _get_or_create(db: Session, barrier_id: str) -> Barrier:
    barrier = db.get(Barrier, barrier_id)
    if barrier is None:
        logger.warning(f"[BARRIER] {barrier_id} missing from store, creating it")
        barrier = Barrier(id=barrier_id, name=BARRIER_NAMES.get(barrier_id, barrier_id), is_open=False)
        db.add(barrier)
        db.flush()
    return barrier


def set_barrier_state(db: Session, barrier_id: str, is_open: bool,
                      now: Optional[datetime] = None) -> DocumentChange:
    """Stage an open/close write without committing. Returns the change to publish after commit."""
    barrier = _get_or_create(db, barrier_id)
    before = barrier.snapshot()
    barrier.is_open = is_open
    if is_open:
        barrier.last_opened_at = now or datetime.utcnow()
    return DocumentChange(BARRIERS, barrier_id, before, barrier.snapshot())


def open_barrier(db: Session, barrier_id: str, now: Optional[datetime] = None) -> DocumentChange:
    return set_barrier_state(db, barrier_id, True, now)


async def update_barrier(barrier_id: str, is_open: bool, db: Session) -> Barrier:
    """Manual operator override. Commits and publishes, so an open still auto-closes."""
    change = set_barrier_state(db, barrier_id, is_open)
    db.commit()
    change_feed.publish(change)
    logger.info(f"[BARRIER] {barrier_id} set {'OPEN' if is_open else 'CLOSED'} by operator")
    return db.get(Barrier, barrier_id)


async def handle_barrier_change(change: DocumentChange, db: Session):
    """Safety closer. Subscribed to the barriers collection."""
    was_open = bool(change.before and change.before.get("is_open"))
    is_open = bool(change.after and change.after.get("is_open"))
    if was_open or not is_open:
        return

    delay = settings.BARRIER_AUTO_CLOSE_SECONDS
    logger.info(f"[BARRIER] {change.document_id} opened. Closing in {delay}s")
    await asyncio.sleep(delay)

    def close():
        return set_barrier_state(db, change.document_id, False)

    closed = await retry_write(db, close, label=f"[BARRIER] auto-close {change.document_id}")
    if closed is None:
        logger.error(f"[BARRIER] {change.document_id} may still be OPEN, operator check required")
        return
    change_feed.publish(closed)
    logger.info(f"[BARRIER] {change.document_id} closed automatically")
