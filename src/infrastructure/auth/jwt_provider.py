"""JWT authentication provider implementation.

Accepts Supabase-issued JWTs (ES256, verified against the project's JWKS)
and locally-created HS256 tokens used by tests and local development.

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": { "display_name": "John" },
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

_DISPLAY_NAME_CLAIMS = ("display_name", "name", "full_name")


class JWKSCache:
    """Lazily fetched ``kid -> JWK`` mapping with refetch on unknown keys."""

    def __init__(self, jwks_url: str, timeout: float = 10.0) -> None:
        self._jwks_url = jwks_url
        self._timeout = timeout
        self._keys: dict[str, Any] | None = None

    def clear(self) -> None:
        self._keys = None

    async def get_key(self, kid: str) -> dict[str, Any] | None:
        """Return the JWK for ``kid``, refetching once to follow key rotation."""
        keys = await self._load()
        if kid not in keys:
            self.clear()
            keys = await self._load()
        return keys.get(kid)

    async def _load(self) -> dict[str, Any]:
        if self._keys is not None:
            return self._keys
        if not self._jwks_url:
            return {}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self._jwks_url, timeout=self._timeout)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch JWKS from %s", self._jwks_url)
            return {}

        self._keys = {
            key_data["kid"]: key_data
            for key_data in payload.get("keys", [])
            if key_data.get("kid")
        }
        logger.info("Fetched %d JWKS keys", len(self._keys))
        return self._keys


_default_jwks_cache = JWKSCache(settings.supabase_jwks_url)


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks_cache: JWKSCache | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks = jwks_cache or _default_jwks_cache

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Validate a JWT and extract the user it was issued for.

        The signing algorithm is read from the token header: ES256 tokens are
        checked against the JWKS public key, anything else against the shared
        secret.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None
        return self._to_user(payload)

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = await self._jwks.get_key(kid)
        if not key_data:
            logger.warning("JWKS key not found for kid=%s", kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    @staticmethod
    def _to_user(payload: dict) -> Optional[TokenUser]:
        subject = payload.get("sub")
        email = payload.get("email")
        if not subject or not email:
            return None

        try:
            user_id = UUID(subject)
        except ValueError:
            return None

        # Supabase keeps the chosen name in user_metadata
        metadata = payload.get("user_metadata") or {}
        display_name = next(
            (metadata[claim] for claim in _DISPLAY_NAME_CLAIMS if metadata.get(claim)),
            payload.get("name"),
        )

        return TokenUser(
            id=user_id,
            email=email,
            display_name=display_name,
            role=payload.get("role"),
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 JWT for a user (tests and local development)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
            "user_metadata": {"display_name": user.display_name},
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
