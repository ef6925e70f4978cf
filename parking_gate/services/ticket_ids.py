# parking_gate/services/ticket_ids.py
"""
Human-readable ticket identifiers: TKT-<year>-<3 digit suffix>.
Random suffixes are checked against the store; after TICKET_ID_MAX_ATTEMPTS
collisions the suffix falls back to the nanosecond clock.
"""

import random
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.models.ticket import Ticket
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)

SUFFIX_MIN = 100
SUFFIX_MAX = 999


def generate_ticket_id(db: Session, now: Optional[datetime] = None, rng: random.Random = None) -> str:
    now = now or datetime.utcnow()
    rng = rng or random
    prefix = f"{settings.TICKET_ID_PREFIX}-{now.year}"

    for _ in range(settings.TICKET_ID_MAX_ATTEMPTS):
        candidate = f"{prefix}-{rng.randint(SUFFIX_MIN, SUFFIX_MAX)}"
        if db.get(Ticket, candidate) is None:
            return candidate

    fallback = f"{prefix}-{time.time_ns()}"
    logger.warning(f"[TICKET] {settings.TICKET_ID_MAX_ATTEMPTS} id collisions, using clock suffix {fallback}")
    return fallback
