from pydantic import BaseModel
from datetime import datetime


class GateRequestAck(BaseModel):
    status: str = "pending"
    message: str
    requested_at: datetime
    expires_in_seconds: int


class GateConfirmation(BaseModel):
    status: str = "confirmed"
    ticket_id: str
