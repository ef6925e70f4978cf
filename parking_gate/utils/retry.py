# parking_gate/utils/retry.py
"""
Bounded retry for store writes made by the reactive rules.
A missed spot sync or a missed auto-close leaves the physical and digital state
out of line, so these writes get a few attempts before giving up.
"""

import asyncio
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


async def retry_write(db: Session, write: Callable[[], object], label: str,
                      attempts: int = None, backoff: float = None):
    """
    Run write() and commit, retrying on store errors with doubling backoff.
    Returns write()'s result, or None once all attempts have failed.
    """
    attempts = attempts or settings.REACTION_RETRY_ATTEMPTS
    delay = settings.REACTION_RETRY_BACKOFF_SECONDS if backoff is None else backoff

    for attempt in range(1, attempts + 1):
        try:
            result = write()
            db.commit()
            return result
        except SQLAlchemyError as e:
            db.rollback()
            if attempt == attempts:
                logger.error(f"{label} failed after {attempts} attempts: {e}")
                return None
            logger.warning(f"{label} failed (attempt {attempt}/{attempts}): {e}. Retry in {delay}s")
            await asyncio.sleep(delay)
            delay *= 2
