# parking_gate/models/system_setting.py
"""System-wide flags read by the physical controller (parking lights)."""

from sqlalchemy import Column, String, Boolean, DateTime
from parking_gate.database import Base

SYSTEM_SETTINGS_ID = "SystemSettings"


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(String(50), primary_key=True)
    lights_on = Column(Boolean, nullable=False, default=False)
    last_updated = Column(DateTime)

    def __repr__(self):
        return f"<SystemSetting {self.id} lights_on={self.lights_on}>"
