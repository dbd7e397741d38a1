"""Access token issuing and validation."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from kdeploy.config import JwtConfig
from kdeploy.domain.auth.model.value import UserId


@dataclass
class TokenService:
    _config: JwtConfig

    def create_access_token(self, user_id: UserId) -> str:
        """Issue a signed access token for ``user_id``."""
        now = datetime.now(UTC)
        payload = {
            "sub": str(user_id),
            "aud": self._config.audience,
            "iat": now,
            "exp": now + timedelta(minutes=self._config.access_token_expire_minutes),
        }
        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Decode and verify an access token.

        Raises:
            jwt.ExpiredSignatureError: If the token has expired
            jwt.InvalidTokenError: If the token is malformed or badly signed
        """
        return jwt.decode(
            token,
            self._config.secret,
            algorithms=[self._config.algorithm],
            audience=self._config.audience,
        )
