# parking_gate/models/ticket.py
"""
Parking tickets table: one row per parking session, from entry to exit.
Created by entry_service on physical confirmation, spot bound by
spot_assignment_service, status advanced by payment_service and exit_service.
"""

from sqlalchemy import Column, String, DateTime, Float, Text
from parking_gate.database import Base

# Spot value of a ticket whose physical spot the sensor has not reported yet
UNRESOLVED_SPOT = "PENDING"

STATUS_ACTIVE = "active"
STATUS_PAID = "paid"
STATUS_COMPLETED = "completed"
STATUS_EXPIRED = "expired"


class Ticket(Base):
    __tablename__ = "parking_tickets"

    id = Column(String(50), primary_key=True)          # e.g. TKT-2025-137
    user_id = Column(String(128), nullable=False, index=True)
    spot_id = Column(String(50), nullable=False, default=UNRESOLVED_SPOT, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    paid_at = Column(DateTime)
    end_time = Column(DateTime)                          # set on exit
    status = Column(String(20), nullable=False, default=STATUS_ACTIVE, index=True)
    amount = Column(Float, nullable=False, default=0)
    qr_code_data = Column(Text)

    def snapshot(self) -> dict:
        """Field values published on the change feed."""
        return {
            "user_id": self.user_id,
            "spot_id": self.spot_id,
            "status": self.status,
        }

    def __repr__(self):
        return f"<Ticket {self.id} user={self.user_id} spot={self.spot_id} status={self.status}>"
