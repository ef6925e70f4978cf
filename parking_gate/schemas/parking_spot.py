from pydantic import BaseModel
from typing import Optional, Union


class ParkingSpotOut(BaseModel):
    id: str
    number: int
    occupied: bool
    assigned_user_id: Optional[str]

    class Config:
        from_attributes = True


class SpotReport(BaseModel):
    spot: Union[int, str]     # "3", 3 or "spot3"


class SpotAssignmentOut(BaseModel):
    ticket_id: str
    spot_id: str
