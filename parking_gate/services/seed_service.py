# parking_gate/services/seed_service.py
"""Populate spots spot1..spotN and both barriers. Safe to run more than once."""

from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.models.barrier import Barrier, ENTRY_BARRIER, EXIT_BARRIER
from parking_gate.models.parking_spot import ParkingSpot
from parking_gate.services.barrier_service import BARRIER_NAMES
from parking_gate.services.spot_assignment_service import spot_id_for
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


def seed_parking_lot(db: Session, spot_count: int = None) -> dict:
    """
    Insert missing spots and barriers. Existing rows keep their state so a
    re-seed never frees an occupied spot.
    """
    spot_count = spot_count or settings.PARKING_SPOT_COUNT
    created_spots = 0
    for number in range(1, spot_count + 1):
        spot_id = spot_id_for(number)
        if db.get(ParkingSpot, spot_id) is None:
            db.add(ParkingSpot(id=spot_id, number=number, occupied=False, assigned_user_id=None))
            created_spots += 1

    created_barriers = 0
    for barrier_id in (ENTRY_BARRIER, EXIT_BARRIER):
        if db.get(Barrier, barrier_id) is None:
            db.add(Barrier(id=barrier_id, name=BARRIER_NAMES[barrier_id], is_open=False))
            created_barriers += 1

    db.commit()
    logger.info(f"Seeded {created_spots} spot(s) and {created_barriers} barrier(s) ({spot_count} spots configured)")
    return {"spots_created": created_spots, "barriers_created": created_barriers, "spot_count": spot_count}
