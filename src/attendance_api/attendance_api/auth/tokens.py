"""JWT issuing and refresh-token verification on top of flask-jwt-extended.

Both helpers need an application context with ``JWTManager`` initialised.
"""

from __future__ import annotations

from typing import Protocol

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from ..core.exceptions import AuthenticationError
from .model import TokenPair, User

INVALID_REFRESH_TOKEN = "Invalid refresh token"


class TokenService(Protocol):
    def issue(self, user: User) -> TokenPair:
        raise NotImplementedError

    def refresh_subject(self, refresh_token: str) -> str:
        """Verify a refresh token and return the user id it was issued to."""

        raise NotImplementedError


class JwtTokenService(TokenService):
    def issue(self, user: User) -> TokenPair:
        role = user.role.value if user.role else None
        access = create_access_token(identity=user.user_id, additional_claims={"email": user.email, "role": role})
        # flask-jwt-extended adds a fresh jti, so every refresh token is distinct
        refresh = create_refresh_token(identity=user.user_id, additional_claims={"email": user.email})
        return TokenPair(access_token=access, refresh_token=refresh)

    def refresh_subject(self, refresh_token: str) -> str:
        try:
            claims = decode_token(refresh_token)
        except (JWTExtendedException, PyJWTError) as e:
            raise AuthenticationError(INVALID_REFRESH_TOKEN) from e
        if claims.get("type") != "refresh" or not claims.get("sub"):
            raise AuthenticationError(INVALID_REFRESH_TOKEN)
        return str(claims["sub"])
