from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Giao diện repository cho User."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_reset_token_hash(self, token_hash: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, *, user_id: str, email: str, password_hash: str, role: Optional[Role]) -> None:
        """Raises ``DuplicateKeyViolation`` when the email is taken."""

        raise NotImplementedError

    def update_refresh_token_hash(self, user_id: str, token_hash: Optional[str]) -> bool:
        raise NotImplementedError

    def update_reset_token(self, user_id: str, token_hash: Optional[str], expires_at: Optional[datetime]) -> None:
        raise NotImplementedError

    def update_password(self, user_id: str, password_hash: str) -> None:
        raise NotImplementedError
