from __future__ import annotations

import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import PASSWORD_MIN_LENGTH, RESET_TOKEN_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DuplicateKeyViolation,
    ValidationError,
)
from ..mail.queue import PasswordResetQueue
from .model import TokenPair, User
from .repository import UserRepository
from .tokens import INVALID_REFRESH_TOKEN, TokenService

logger = logging.getLogger(__name__)

EMAIL_ALREADY_REGISTERED = "Email already registered"
INVALID_CREDENTIALS = "Invalid credentials"
REFRESH_TOKEN_MISMATCH = "Refresh token mismatch"
USER_NOT_FOUND = "User not found"
INVALID_RESET_TOKEN = "Invalid or expired reset token"


def _sha256(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _matches(stored_hash: Optional[str], value: str) -> bool:
    if not stored_hash:
        return False
    try:
        return check_password_hash(stored_hash, value)
    except ValueError:
        # unknown or corrupted hash format
        return False


class AuthService:
    """Register/login with refresh-token rotation and e-mailed password reset.

    Only a hash of the latest refresh token is stored, so issuing a new pair
    invalidates the previous refresh token.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        mail_queue: PasswordResetQueue,
        *,
        reset_url: str,
        reset_ttl_minutes: int = RESET_TOKEN_TTL_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._tokens = tokens
        self._mail_queue = mail_queue
        self._reset_url = reset_url
        self._reset_ttl = timedelta(minutes=int(reset_ttl_minutes))
        self._clock = clock

    def register(self, *, email: str, password: str, role: Optional[str] = None) -> TokenPair:
        email = require_email(email)
        password = require_min_length(password, "password", PASSWORD_MIN_LENGTH)
        user_role = self._parse_role(role)

        user_id = str(uuid.uuid4())
        try:
            self._users.create(
                user_id=user_id,
                email=email,
                password_hash=generate_password_hash(password),
                role=user_role,
            )
        except DuplicateKeyViolation:
            raise ConflictError(EMAIL_ALREADY_REGISTERED) from None

        user = self._users.get_by_id(user_id)
        logger.info("Registered user %s", user_id)
        return self._issue(user)

    def validate_user(self, email: str, password: str) -> Optional[User]:
        user = self._users.get_by_email(str(email or "").strip().lower())
        if not user or not _matches(user.password_hash, str(password or "")):
            return None
        return user

    def login(self, *, email: str, password: str) -> TokenPair:
        require_non_empty(email, "email")
        require_non_empty(password, "password")
        user = self.validate_user(email, password)
        if not user:
            raise AuthenticationError(INVALID_CREDENTIALS)
        return self._issue(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        refresh_token = require_non_empty(refresh_token, "refreshToken")
        user_id = self._tokens.refresh_subject(refresh_token)

        user = self._users.get_by_id(user_id)
        if not user or not user.refresh_token_hash:
            raise AuthenticationError(INVALID_REFRESH_TOKEN)
        if not _matches(user.refresh_token_hash, refresh_token):
            logger.warning("Rejected stale refresh token for user %s", user_id)
            raise AuthorizationError(REFRESH_TOKEN_MISMATCH)
        return self._issue(user)

    def logout(self, user_id: str) -> None:
        self._users.update_refresh_token_hash(user_id, None)

    def get_profile(self, user_id: str) -> dict:
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError(USER_NOT_FOUND)
        return user.to_profile()

    def forgot_password(self, email: str) -> None:
        user = self._users.get_by_email(require_email(email))
        if not user:
            # same answer whether or not the address exists
            return

        raw_token = secrets.token_hex(32)
        self._users.update_reset_token(user.user_id, _sha256(raw_token), self._clock() + self._reset_ttl)
        self._mail_queue.enqueue_reset_password_email(
            email=user.email,
            reset_url=f"{self._reset_url}?token={raw_token}",
        )
        logger.info("Queued reset password email for user %s", user.user_id)

    def reset_password(self, *, token: str, new_password: str) -> None:
        token = require_non_empty(token, "token")
        new_password = require_min_length(new_password, "newPassword", PASSWORD_MIN_LENGTH)

        user = self._users.get_by_reset_token_hash(_sha256(token))
        if not user:
            raise ValidationError(INVALID_RESET_TOKEN)
        if not user.reset_token_expires_at or user.reset_token_expires_at < self._clock():
            self._users.update_reset_token(user.user_id, None, None)
            raise ValidationError(INVALID_RESET_TOKEN)

        self._users.update_password(user.user_id, generate_password_hash(new_password))
        self._users.update_reset_token(user.user_id, None, None)
        self._users.update_refresh_token_hash(user.user_id, None)
        logger.info("Password reset for user %s", user.user_id)

    def _issue(self, user: User) -> TokenPair:
        pair = self._tokens.issue(user)
        self._users.update_refresh_token_hash(user.user_id, generate_password_hash(pair.refresh_token))
        return pair

    @staticmethod
    def _parse_role(role: Optional[str]) -> Optional[Role]:
        if role is None or role == "":
            return None
        try:
            return Role(role)
        except ValueError:
            allowed = ", ".join(r.value for r in Role)
            raise ValidationError(f"role must be one of the following values: {allowed}") from None
