"""
Entry/exit protocol endpoints.
POST /entry/request, /exit/request: app, authenticated user
POST /hardware/entry/confirm, .../exit/confirm: gate buttons (network-restricted, no body)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_gate.config import settings
from parking_gate.database import get_db
from parking_gate.schemas.gate import GateRequestAck, GateConfirmation
from parking_gate.security import get_current_user_id
from parking_gate.services.entry_service import request_entry, confirm_entry
from parking_gate.services.exit_service import request_exit, confirm_exit

router = APIRouter()


@router.post("/entry/request", response_model=GateRequestAck, summary="Request entry: press the gate button next")
async def post_entry_request(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    marker = await request_entry(user_id, db)
    return GateRequestAck(
        message="Awaiting physical confirmation at the entry gate",
        requested_at=marker.requested_at,
        expires_in_seconds=settings.CONFIRMATION_WINDOW_SECONDS,
    )


@router.post("/exit/request", response_model=GateRequestAck, summary="Request exit for the paid ticket")
async def post_exit_request(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    marker = await request_exit(user_id, db)
    return GateRequestAck(
        message="Awaiting physical confirmation at the exit gate",
        requested_at=marker.requested_at,
        expires_in_seconds=settings.CONFIRMATION_WINDOW_SECONDS,
    )


@router.post("/hardware/entry/confirm", response_model=GateConfirmation, summary="Entry gate button")
async def post_entry_confirm(db: Session = Depends(get_db)):
    ticket_id = await confirm_entry(db)
    return GateConfirmation(ticket_id=ticket_id)


@router.post("/hardware/exit/confirm", response_model=GateConfirmation, summary="Exit gate button")
async def post_exit_confirm(db: Session = Depends(get_db)):
    ticket_id = await confirm_exit(db)
    return GateConfirmation(ticket_id=ticket_id)
