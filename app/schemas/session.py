import datetime as dt

from pydantic import BaseModel, field_validator

from app.models.photo_session import PaymentStatus, SessionStatus, SessionType


class SessionFormValidators(BaseModel):
    """Field checks shared by the create and update payloads."""

    @field_validator("client_id", check_fields=False)
    @classmethod
    def check_client_id(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Cliente é obrigatório")
        return value.strip()

    @field_validator("time", check_fields=False)
    @classmethod
    def check_time(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Horário é obrigatório")
        return value.strip()

    @field_validator("duration", check_fields=False)
    @classmethod
    def check_duration(cls, value: int | None) -> int:
        if value is None or value < 1 or value > 12:
            raise ValueError("Duração deve ser entre 1 e 12 horas")
        return value

    @field_validator("value", check_fields=False)
    @classmethod
    def check_value(cls, value: float | None) -> float:
        if value is None or value < 0:
            raise ValueError("Valor não pode ser negativo")
        return value


class SessionCreate(SessionFormValidators):
    client_id: str
    type: SessionType
    date: dt.date
    time: str
    duration: int = 2
    location: str = ""
    value: float = 0.0
    notes: str = ""

    @field_validator("date")
    @classmethod
    def check_date_not_past(cls, value: dt.date) -> dt.date:
        if value < dt.date.today():
            raise ValueError("Data não pode ser no passado")
        return value


class SessionUpdate(SessionFormValidators):
    client_id: str | None = None
    type: SessionType | None = None
    date: dt.date | None = None
    time: str | None = None
    duration: int | None = None
    location: str | None = None
    value: float | None = None
    notes: str | None = None


class SessionStatusUpdate(BaseModel):
    status: SessionStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class SessionRead(BaseModel):
    id: str
    client_id: str
    client_name: str
    type: SessionType
    date: dt.date
    time: str
    duration: int
    location: str = ""
    value: float
    status: SessionStatus
    payment_status: PaymentStatus
    notes: str = ""
    created_at: dt.datetime
    updated_at: dt.datetime
