# parking_gate/models/barrier.py
"""
Barriers table: the physical entry and exit gates.
The gate controller watches is_open; barrier_service closes it automatically.
"""

from sqlalchemy import Column, String, Boolean, DateTime
from parking_gate.database import Base

ENTRY_BARRIER = "enterBarrier"
EXIT_BARRIER = "exitBarrier"


class Barrier(Base):
    __tablename__ = "barriers"

    id = Column(String(50), primary_key=True)            # enterBarrier | exitBarrier
    name = Column(String(100))
    is_open = Column(Boolean, nullable=False, default=False)
    last_opened_at = Column(DateTime)

    def snapshot(self) -> dict:
        return {"is_open": bool(self.is_open)}

    def __repr__(self):
        return f"<Barrier {self.id} open={self.is_open}>"
