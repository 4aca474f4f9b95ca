from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Thực thể miền (domain): tài khoản đăng nhập API.

    Hash fields never leave the service layer; ``to_profile`` drops them.
    """

    user_id: str
    email: str
    password_hash: str
    role: Optional[Role] = None
    refresh_token_hash: Optional[str] = None
    reset_token_hash: Optional[str] = None
    reset_token_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_profile(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "role": self.role.value if self.role else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}
