from inkbook.db.models.user import User
from inkbook.db.models.appointment import Appointment

__all__ = ["User", "Appointment"]
