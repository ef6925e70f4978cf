"""The caller's tickets + simulated payment."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_gate.database import get_db
from parking_gate.errors import TicketNotFound
from parking_gate.models.ticket import Ticket
from parking_gate.schemas.ticket import TicketOut
from parking_gate.security import get_current_user_id
from parking_gate.services.payment_service import pay_ticket

router = APIRouter()


@router.get("/tickets", response_model=list[TicketOut], summary="Caller's tickets, newest first")
def list_tickets(status: Optional[str] = None, limit: int = 50,
                 user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    q = db.query(Ticket).filter(Ticket.user_id == user_id)
    if status:
        q = q.filter(Ticket.status == status)
    return q.order_by(Ticket.start_time.desc()).limit(limit).all()


@router.get("/tickets/{ticket_id}", response_model=TicketOut)
def get_ticket(ticket_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    ticket = db.get(Ticket, ticket_id)
    if not ticket or ticket.user_id != user_id:
        raise TicketNotFound(f"Ticket {ticket_id} not found")
    return ticket


@router.post("/tickets/{ticket_id}/pay", response_model=TicketOut, summary="Pay an active ticket (simulated)")
async def post_ticket_payment(ticket_id: str, user_id: str = Depends(get_current_user_id),
                              db: Session = Depends(get_db)):
    return await pay_ticket(ticket_id, user_id, db)
