from datetime import datetime

from pydantic import BaseModel, field_validator

from app.services.validation_service import validate_email, validate_phone


class ClientBase(BaseModel):
    name: str
    email: str
    phone: str
    address: str | None = None
    notes: str | None = None


class ClientFormValidators(BaseModel):
    """Field checks shared by the create and update payloads."""

    @field_validator("name", check_fields=False)
    @classmethod
    def check_name(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Nome é obrigatório")
        return value.strip()

    @field_validator("email", check_fields=False)
    @classmethod
    def check_email(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Email é obrigatório")
        value = value.strip()
        if not validate_email(value):
            raise ValueError("Email inválido")
        return value

    @field_validator("phone", check_fields=False)
    @classmethod
    def check_phone(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Telefone é obrigatório")
        value = value.strip()
        if not validate_phone(value):
            raise ValueError("Telefone deve ter pelo menos 10 dígitos")
        return value


class ClientCreate(ClientFormValidators, ClientBase):
    pass


class ClientUpdate(ClientFormValidators):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class ClientRead(ClientBase):
    id: str
    created_at: datetime
    updated_at: datetime
