"""SQLAlchemy models for StayKasa.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from staykasa.models.booking import Booking
from staykasa.models.notification import Notification
from staykasa.models.property import Property
from staykasa.models.user import User

__all__ = [
    "Booking",
    "Notification",
    "Property",
    "User",
]
