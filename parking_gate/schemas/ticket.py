from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class TicketOut(BaseModel):
    id: str
    user_id: str
    spot_id: str
    start_time: datetime
    paid_at: Optional[datetime]
    end_time: Optional[datetime]
    status: str
    amount: float
    qr_code_data: Optional[str]

    class Config:
        from_attributes = True
