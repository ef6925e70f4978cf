# parking_gate/services/lighting_service.py
"""Scheduled lighting toggle: lights on between NIGHT_START_HOUR and NIGHT_END_HOUR."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parking_gate.config import settings
from parking_gate.models.system_setting import SystemSetting, SYSTEM_SETTINGS_ID
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


def is_night(hour: int) -> bool:
    return hour >= settings.NIGHT_START_HOUR or hour < settings.NIGHT_END_HOUR


async def toggle_parking_lights(db: Session, now: Optional[datetime] = None) -> Optional[bool]:
    """Write the lights flag for the current local hour. Returns the new state, None on failure."""
    now = now or datetime.now()
    lights_on = is_night(now.hour)
    logger.info(f"[LIGHTS] Checking time: {now.hour}:00. Is night? {lights_on}")

    try:
        db.merge(SystemSetting(id=SYSTEM_SETTINGS_ID, lights_on=lights_on, last_updated=now))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[LIGHTS] Error toggling parking lights: {e}", exc_info=True)
        return None

    logger.info(f"[LIGHTS] Parking lights turned {'ON' if lights_on else 'OFF'}")
    return lights_on
