# parking_gate/services/scheduler.py
"""
Periodic jobs, run as asyncio tasks next to the API:
  - lighting toggle      every LIGHTS_TOGGLE_INTERVAL_SECONDS
  - unclaimed expiry     every EXPIRY_SWEEP_INTERVAL_SECONDS
Each tick gets a fresh DB session. A failing tick is logged and the loop carries on.
"""

import asyncio

from parking_gate.config import settings
from parking_gate.database import SessionLocal
from parking_gate.services.exit_service import expire_unclaimed_tickets
from parking_gate.services.lighting_service import toggle_parking_lights
from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)


async def run_periodically(name: str, interval: float, job, session_factory=SessionLocal):
    """Run job(db) now and then every interval seconds, forever."""
    while True:
        db = session_factory()
        try:
            await job(db)
        except Exception as e:
            logger.error(f"Scheduled job {name} failed: {e}", exc_info=True)
        finally:
            db.close()
        await asyncio.sleep(interval)


def start_scheduled_jobs() -> list[asyncio.Task]:
    """Launch every periodic job. Called once at backend startup."""
    jobs = {
        "toggle-parking-lights": (settings.LIGHTS_TOGGLE_INTERVAL_SECONDS, toggle_parking_lights),
        "expire-unclaimed-tickets": (settings.EXPIRY_SWEEP_INTERVAL_SECONDS, expire_unclaimed_tickets),
    }
    logger.info(f"Starting {len(jobs)} scheduled jobs: {list(jobs)}")
    return [
        asyncio.create_task(run_periodically(name, interval, job), name=f"job-{name}")
        for name, (interval, job) in jobs.items()
    ]
