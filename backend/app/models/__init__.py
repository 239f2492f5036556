"""SQLAlchemy models for Shortlet Ops.

All models are imported here so that ``Base.metadata.create_all`` can
discover them. If you add a new model, import it in this file.
"""

from app.models.booking import Booking
from app.models.communication import GuestMessage, MessageAutomation, MessageTemplate
from app.models.guest import Guest
from app.models.maintenance import MaintenanceLog
from app.models.property import Property
from app.models.team import TeamMember, TeamTask

__all__ = [
    "Booking",
    "Guest",
    "GuestMessage",
    "MaintenanceLog",
    "MessageAutomation",
    "MessageTemplate",
    "Property",
    "TeamMember",
    "TeamTask",
]
