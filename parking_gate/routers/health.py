"""
System health check endpoint.
Returns status of backend + DB + barrier state + outstanding gate requests.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from parking_gate.database import get_db
from parking_gate.models.barrier import Barrier
from parking_gate.services.pending_service import pending_markers
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Barrier open/closed flags
    - Pending entry/exit requests with their age
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "barriers": {},
        "pending_requests": {},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"
        return result

    result["barriers"] = {b.id: "open" if b.is_open else "closed" for b in db.query(Barrier).all()}
    result["pending_requests"] = pending_markers(db)
    return result
