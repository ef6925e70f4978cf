"""Lighting state + lot seeding."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_gate.database import get_db
from parking_gate.models.system_setting import SystemSetting, SYSTEM_SETTINGS_ID
from parking_gate.schemas.system import LightsOut
from parking_gate.services.seed_service import seed_parking_lot

router = APIRouter()


@router.get("/system/lights", response_model=LightsOut, summary="Parking lights state")
def get_lights(db: Session = Depends(get_db)):
    setting = db.get(SystemSetting, SYSTEM_SETTINGS_ID)
    if not setting:
        return LightsOut(lights_on=False, last_updated=None)
    return setting


@router.post("/admin/seed", summary="Operator: create spots and barriers")
def post_seed(spot_count: int = None, db: Session = Depends(get_db)):
    """Run once per installation. Existing spots keep their state."""
    return {"status": "seeded", **seed_parking_lot(db, spot_count)}
