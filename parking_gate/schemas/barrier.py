from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class BarrierOut(BaseModel):
    id: str
    name: Optional[str]
    is_open: bool
    last_opened_at: Optional[datetime]

    class Config:
        from_attributes = True


class BarrierUpdate(BaseModel):
    is_open: bool
