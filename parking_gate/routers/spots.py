"""Spot grid read endpoints + the occupancy sensor webhook."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_gate.database import get_db
from parking_gate.errors import UnknownSpot
from parking_gate.models.parking_spot import ParkingSpot
from parking_gate.schemas.parking_spot import ParkingSpotOut, SpotReport, SpotAssignmentOut
from parking_gate.services.spot_assignment_service import assign_spot, normalize_spot_id

router = APIRouter()


@router.get("/spots", response_model=list[ParkingSpotOut], summary="All spots with occupancy")
def list_spots(occupied: bool = None, db: Session = Depends(get_db)):
    q = db.query(ParkingSpot)
    if occupied is not None:
        q = q.filter(ParkingSpot.occupied == occupied)
    return q.order_by(ParkingSpot.number).all()


@router.get("/spots/summary", summary="Free / occupied counts")
def spots_summary(db: Session = Depends(get_db)):
    total = db.query(ParkingSpot).count()
    occupied = db.query(ParkingSpot).filter(ParkingSpot.occupied == True).count()  # noqa: E712
    return {"total": total, "occupied": occupied, "available": total - occupied,
            "occupancy_percent": round(occupied / total * 100, 1) if total else 0}


@router.get("/spots/{spot_id}", response_model=ParkingSpotOut)
def get_spot(spot_id: str, db: Session = Depends(get_db)):
    spot = db.get(ParkingSpot, normalize_spot_id(spot_id))
    if not spot:
        raise UnknownSpot(f"Unknown parking spot: {spot_id}")
    return spot


@router.post("/hardware/spots/assign", response_model=SpotAssignmentOut, summary="Occupancy sensor: car parked")
async def post_spot_assignment(body: SpotReport, db: Session = Depends(get_db)):
    assignment = await assign_spot(body.spot, db)
    return SpotAssignmentOut(ticket_id=assignment.ticket_id, spot_id=assignment.spot_id)
