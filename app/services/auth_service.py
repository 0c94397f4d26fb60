from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings
from app.models.user import User
from app.services.audit_log_service import log_event
from app.services.validation_service import validate_email

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

AUTH_ERROR_MESSAGES = {
    "auth/user-not-found": "Usuário não encontrado",
    "auth/wrong-password": "Senha incorreta",
    "auth/email-already-in-use": "Este email já está em uso",
    "auth/weak-password": "A senha deve ter pelo menos 6 caracteres",
    "auth/invalid-email": "Email inválido",
    "auth/too-many-requests": "Muitas tentativas. Tente novamente mais tarde",
    "auth/network-request-failed": "Erro de conexão. Verifique sua internet",
    "auth/user-disabled": "Esta conta foi desabilitada",
    "auth/operation-not-allowed": "Operação não permitida",
    "auth/invalid-credential": "Credenciais inválidas",
}
UNKNOWN_AUTH_ERROR = "Erro desconhecido. Tente novamente"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_auth_error_message(code: str | None) -> str:
    return AUTH_ERROR_MESSAGES.get(code or "", UNKNOWN_AUTH_ERROR)


class AuthProviderError(Exception):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(code)


@dataclass
class AuthResult:
    user: User | None = None
    error: str | None = None
    code: str | None = None
    access_token: str | None = None
    reset_token: str | None = None


class AuthService:
    """Email/password identity provider with signed bearer tokens.

    Public operations never raise provider errors: they return an
    ``AuthResult`` whose ``error`` holds the translated message. The
    service keeps no signed-in user of its own; callers resolve the user
    of each request from its token with ``verify_token``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._failed_logins: dict[str, list[datetime]] = {}
        self.loading = False

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)

    def _encode(self, user: User, token_type: str, expires_minutes: int) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
        payload = {
            "sub": user.id,
            "email": user.email,
            "type": token_type,
            "ver": user.token_version,
            "exp": expire,
        }
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.token_algorithm)

    def create_access_token(self, user: User) -> str:
        return self._encode(user, "access", self._settings.access_token_expire_minutes)

    def create_reset_token(self, user: User) -> str:
        return self._encode(user, "reset", self._settings.reset_token_expire_minutes)

    async def _user_from_token(self, session: AsyncSession, token: str, token_type: str) -> User:
        try:
            payload = jwt.decode(token, self._settings.secret_key, algorithms=[self._settings.token_algorithm])
        except JWTError as exc:
            raise AuthProviderError("auth/invalid-credential") from exc

        user_id = payload.get("sub")
        if payload.get("type") != token_type or not user_id:
            raise AuthProviderError("auth/invalid-credential")

        user = await session.get(User, user_id)
        if user is None:
            raise AuthProviderError("auth/user-not-found")
        if payload.get("ver") != user.token_version:
            raise AuthProviderError("auth/invalid-credential")
        return user

    def _recent_failures(self, email: str) -> list[datetime]:
        window_start = datetime.utcnow() - timedelta(minutes=self._settings.failed_login_window_minutes)
        recent = [moment for moment in self._failed_logins.get(email, []) if moment >= window_start]
        if recent:
            self._failed_logins[email] = recent
        else:
            self._failed_logins.pop(email, None)
        return recent

    def _record_failure(self, email: str) -> None:
        self._failed_logins.setdefault(email, []).append(datetime.utcnow())

    async def _get_user_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await session.scalar(select(User).where(func.lower(User.email) == email))

    async def _attempt(self, action: Awaitable[AuthResult]) -> AuthResult:
        self.loading = True
        try:
            return await action
        except AuthProviderError as exc:
            return AuthResult(error=get_auth_error_message(exc.code), code=exc.code)
        except SQLAlchemyError:
            logger.exception("Auth storage unavailable")
            code = "auth/network-request-failed"
            return AuthResult(error=get_auth_error_message(code), code=code)
        finally:
            self.loading = False

    async def login(self, email: str, password: str) -> AuthResult:
        return await self._attempt(self._login(email.strip().lower(), password))

    async def _login(self, email: str, password: str) -> AuthResult:
        if not validate_email(email):
            raise AuthProviderError("auth/invalid-email")
        if len(self._recent_failures(email)) >= self._settings.max_failed_logins:
            raise AuthProviderError("auth/too-many-requests")

        async with self._session_factory() as session:
            user = await self._get_user_by_email(session, email)

        if user is None:
            self._record_failure(email)
            raise AuthProviderError("auth/user-not-found")
        # Account state is only disclosed to callers holding the password.
        if not self.verify_password(password, user.hashed_password):
            self._record_failure(email)
            raise AuthProviderError("auth/wrong-password")
        if user.disabled:
            raise AuthProviderError("auth/user-disabled")

        self._failed_logins.pop(email, None)
        log_event("login", user_id=user.id)
        return AuthResult(user=user, access_token=self.create_access_token(user))

    async def register(self, email: str, password: str, display_name: str) -> AuthResult:
        return await self._attempt(self._register(email.strip().lower(), password, display_name.strip()))

    async def _register(self, email: str, password: str, display_name: str) -> AuthResult:
        if not self._settings.allow_registration:
            raise AuthProviderError("auth/operation-not-allowed")
        if not validate_email(email):
            raise AuthProviderError("auth/invalid-email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthProviderError("auth/weak-password")

        async with self._session_factory() as session:
            if await self._get_user_by_email(session, email) is not None:
                raise AuthProviderError("auth/email-already-in-use")

            user = User(email=email, display_name=display_name, hashed_password=self.get_password_hash(password))
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                raise AuthProviderError("auth/email-already-in-use") from exc
            await session.refresh(user)

        log_event("register", user_id=user.id)
        return AuthResult(user=user, access_token=self.create_access_token(user))

    async def logout(self, user: User) -> AuthResult:
        """Revoke every access token issued to ``user`` so far."""
        return await self._attempt(self._logout(user.id))

    async def _logout(self, user_id: str) -> AuthResult:
        async with self._session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise AuthProviderError("auth/user-not-found")
            user.token_version += 1
            await session.commit()

        log_event("logout", user_id=user_id)
        return AuthResult()

    async def reset_password(self, email: str) -> AuthResult:
        return await self._attempt(self._reset_password(email.strip().lower()))

    async def _reset_password(self, email: str) -> AuthResult:
        if not validate_email(email):
            raise AuthProviderError("auth/invalid-email")

        async with self._session_factory() as session:
            user = await self._get_user_by_email(session, email)
        if user is None:
            raise AuthProviderError("auth/user-not-found")

        log_event("password_reset_requested", user_id=user.id)
        return AuthResult(user=user, reset_token=self.create_reset_token(user))

    async def confirm_password_reset(self, token: str, new_password: str) -> AuthResult:
        return await self._attempt(self._confirm_password_reset(token, new_password))

    async def _confirm_password_reset(self, token: str, new_password: str) -> AuthResult:
        async with self._session_factory() as session:
            user = await self._user_from_token(session, token, "reset")
            if len(new_password) < MIN_PASSWORD_LENGTH:
                raise AuthProviderError("auth/weak-password")

            user.hashed_password = self.get_password_hash(new_password)
            # Also invalidates this reset token and any open sessions.
            user.token_version += 1
            await session.commit()

        self._failed_logins.pop(user.email, None)
        log_event("password_reset", user_id=user.id)
        return AuthResult(user=user)

    async def verify_token(self, token: str) -> AuthResult:
        return await self._attempt(self._verify_token(token))

    async def _verify_token(self, token: str) -> AuthResult:
        async with self._session_factory() as session:
            user = await self._user_from_token(session, token, "access")
        if user.disabled:
            raise AuthProviderError("auth/user-disabled")
        return AuthResult(user=user)
