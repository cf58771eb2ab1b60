# inkbook/db/base.py

"""
Imports all the ORM models so Alembic and create_all can discover them.
Whenever you add a new model, import it here.
"""
from inkbook.db.session import Base, Database
from inkbook.db.models.user import User
from inkbook.db.models.appointment import Appointment

__all__ = ["Base", "User", "Appointment", "init_db"]


async def init_db(database: Database):
    """Initialize database by creating all tables"""
    await database.create_all()
