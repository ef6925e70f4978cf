# parking_gate/models/parking_spot.py
"""
Parking spots table: one row per physical space (spot1..spotN).
occupied/assigned_user_id are kept in sync with tickets by
spot_assignment_service and consistency_service.
"""

from sqlalchemy import Column, Integer, String, Boolean
from parking_gate.database import Base


class ParkingSpot(Base):
    __tablename__ = "parking_spots"

    id = Column(String(50), primary_key=True)            # spot<number>
    number = Column(Integer, nullable=False, unique=True)
    occupied = Column(Boolean, nullable=False, default=False, index=True)
    assigned_user_id = Column(String(128))

    def __repr__(self):
        return f"<ParkingSpot {self.id} occupied={self.occupied} user={self.assigned_user_id}>"
