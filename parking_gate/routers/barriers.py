"""Barrier state + operator override. Any open still auto-closes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_gate.database import get_db
from parking_gate.errors import NotFound
from parking_gate.models.barrier import Barrier
from parking_gate.schemas.barrier import BarrierOut, BarrierUpdate
from parking_gate.services.barrier_service import BARRIER_NAMES, update_barrier

router = APIRouter()


@router.get("/barriers", response_model=list[BarrierOut])
def list_barriers(db: Session = Depends(get_db)):
    return db.query(Barrier).order_by(Barrier.id).all()


@router.put("/barriers/{barrier_id}", response_model=BarrierOut, summary="Operator: open/close a barrier")
async def put_barrier(barrier_id: str, body: BarrierUpdate, db: Session = Depends(get_db)):
    if barrier_id not in BARRIER_NAMES:
        raise NotFound(f"Barrier '{barrier_id}' not found")
    return await update_barrier(barrier_id, body.is_open, db)
