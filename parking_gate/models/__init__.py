# Parking Gate: Database Models
# Import all models here for SQLAlchemy discovery

from parking_gate.models.ticket import Ticket                    # noqa
from parking_gate.models.parking_spot import ParkingSpot         # noqa
from parking_gate.models.barrier import Barrier                  # noqa
from parking_gate.models.pending_request import PendingRequest   # noqa
from parking_gate.models.system_setting import SystemSetting     # noqa
