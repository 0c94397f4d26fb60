import datetime as dt
import enum

from sqlalchemy import Date, DateTime, Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.client import new_document_id


class SessionType(str, enum.Enum):
    NEWBORN = "newborn"
    GESTANTE = "gestante"
    CASAMENTO = "casamento"
    CORPORATIVO = "corporativo"
    FAMILIA = "familia"
    EVENTO = "evento"
    PRODUTO = "produto"


class SessionStatus(str, enum.Enum):
    AGENDADO = "agendado"
    CONFIRMADO = "confirmado"
    REALIZADO = "realizado"
    CANCELADO = "cancelado"


class PaymentStatus(str, enum.Enum):
    PENDENTE = "pendente"
    SINAL = "sinal"
    PAGO = "pago"


class PhotoSession(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_document_id)
    # Back-reference only: sessions are removed by the service before their client.
    client_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[SessionType] = mapped_column(Enum(SessionType, name="session_type_enum"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(16), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    location: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    value: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, name="session_status_enum"),
        default=SessionStatus.AGENDADO,
        nullable=False,
        index=True,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status_enum"),
        default=PaymentStatus.PENDENTE,
        nullable=False,
        index=True,
    )
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow,
        onupdate=dt.datetime.utcnow,
        nullable=False,
    )
