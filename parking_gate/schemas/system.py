from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class LightsOut(BaseModel):
    lights_on: bool
    last_updated: Optional[datetime]

    class Config:
        from_attributes = True
