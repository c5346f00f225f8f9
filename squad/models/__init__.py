from squad.core.database import Base

# Import all models here to ensure they are registered with Base.
# Tables are created by Database.create_all() (see squad.main and squad.cli).
from .user import User
from .event import Event
from .attendance import Attendance, Equipment

__all__ = ["Base", "User", "Event", "Attendance", "Equipment"]
