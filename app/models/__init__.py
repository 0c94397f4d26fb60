from app.models.client import Client
from app.models.photo_session import PaymentStatus, PhotoSession, SessionStatus, SessionType
from app.models.user import User

__all__ = ["Client", "PaymentStatus", "PhotoSession", "SessionStatus", "SessionType", "User"]
