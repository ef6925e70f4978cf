# parking_gate/models/pending_request.py
"""
Pending request markers: "digital request made, awaiting physical confirmation".
The primary key is the request kind, so there is exactly one slot per gate side.
Owned by entry_service (kind=entry) and exit_service (kind=exit).
"""

from sqlalchemy import Column, String, DateTime
from parking_gate.database import Base

KIND_ENTRY = "entry"
KIND_EXIT = "exit"


class PendingRequest(Base):
    __tablename__ = "pending_requests"

    kind = Column(String(20), primary_key=True)          # entry | exit
    user_id = Column(String(128), nullable=False)
    ticket_id = Column(String(50))                       # exit only
    requested_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<PendingRequest {self.kind} user={self.user_id} at={self.requested_at}>"
