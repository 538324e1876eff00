"""Unit tests for JWTAuthProvider and the JWKS cache.

Covers:
- claim extraction (missing sub/email, non-UUID subject, display name fallbacks)
- JWKSCache fetching, caching, rotation refetch and error handling
- the ES256 path with a mocked JWKS lookup
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWKSCache, JWTAuthProvider
from infrastructure.auth.provider import TokenUser

JWKS_URL = "https://example.supabase.co/auth/v1/.well-known/jwks.json"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


def _mock_http_client(response_json: dict | None = None, error: Exception | None = None) -> AsyncMock:
    response = MagicMock()
    response.json.return_value = response_json or {}
    response.raise_for_status = MagicMock()

    client = AsyncMock()
    if error:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    """JWTAuthProvider configured for HS256 (local/test tokens)."""
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


# ---------------------------------------------------------------------------
# Tests: claims
# ---------------------------------------------------------------------------


class TestValidateTokenClaims:
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "user@example.com", "exp": 9999999999},
            {"sub": str(uuid4()), "exp": 9999999999},
            {"sub": "", "email": "user@example.com", "exp": 9999999999},
            {"sub": str(uuid4()), "email": "", "exp": 9999999999},
            {"sub": "not-a-uuid", "email": "user@example.com", "exp": 9999999999},
        ],
    )
    async def test_returns_none_for_unusable_claims(
        self, hs256_provider: JWTAuthProvider, payload: dict
    ):
        result = await hs256_provider.validate_token(_make_hs256_token(payload))

        assert result is None

    async def test_round_trips_created_token(self, hs256_provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="alice@example.com", display_name="Alice")

        result = await hs256_provider.validate_token(hs256_provider.create_token(user))

        assert result == TokenUser(
            id=user.id, email=user.email, display_name="Alice", role="authenticated"
        )

    @pytest.mark.parametrize(
        ("claims", "expected"),
        [
            ({"user_metadata": {"full_name": "Full Name"}}, "Full Name"),
            ({"user_metadata": {"name": "Short", "full_name": "Full"}}, "Short"),
            ({"user_metadata": {}, "name": "Top Level"}, "Top Level"),
            ({}, None),
        ],
    )
    async def test_display_name_fallbacks(
        self, hs256_provider: JWTAuthProvider, claims: dict, expected: str | None
    ):
        payload = {"sub": str(uuid4()), "email": "u@example.com", "exp": 9999999999, **claims}

        result = await hs256_provider.validate_token(_make_hs256_token(payload))

        assert result is not None
        assert result.display_name == expected

    async def test_garbage_token_returns_none(self, hs256_provider: JWTAuthProvider):
        assert await hs256_provider.validate_token("not-a-jwt") is None


# ---------------------------------------------------------------------------
# Tests: JWKSCache
# ---------------------------------------------------------------------------


class TestJWKSCache:
    async def test_returns_none_when_no_url(self):
        cache = JWKSCache("")

        assert await cache.get_key("any") is None

    async def test_fetches_and_caches_keys(self):
        client = _mock_http_client(
            {
                "keys": [
                    {"kid": "key-1", "kty": "EC"},
                    {"kid": "key-2", "kty": "EC"},
                ]
            }
        )
        cache = JWKSCache(JWKS_URL)

        with patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client):
            first = await cache.get_key("key-1")
            second = await cache.get_key("key-2")

        assert first == {"kid": "key-1", "kty": "EC"}
        assert second == {"kid": "key-2", "kty": "EC"}
        client.get.assert_called_once_with(JWKS_URL, timeout=10.0)

    async def test_skips_keys_without_kid(self):
        client = _mock_http_client({"keys": [{"kty": "EC"}, {"kid": "good-key", "kty": "EC"}]})
        cache = JWKSCache(JWKS_URL)

        with patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client):
            assert await cache.get_key("good-key") is not None

    async def test_http_error_yields_no_key(self):
        client = _mock_http_client(error=httpx.ConnectError("Connection refused"))
        cache = JWKSCache(JWKS_URL)

        with patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client):
            assert await cache.get_key("key-1") is None

    async def test_unknown_kid_triggers_one_refetch(self):
        client = AsyncMock()
        first, second = MagicMock(), MagicMock()
        first.json.return_value = {"keys": [{"kid": "old"}]}
        second.json.return_value = {"keys": [{"kid": "old"}, {"kid": "rotated"}]}
        client.get.side_effect = [first, second]
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=False)
        cache = JWKSCache(JWKS_URL)

        with patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client):
            key = await cache.get_key("rotated")

        assert key == {"kid": "rotated"}
        assert client.get.call_count == 2


# ---------------------------------------------------------------------------
# Tests: ES256 path
# ---------------------------------------------------------------------------


class TestEs256Path:
    async def test_returns_none_when_header_has_no_kid(self):
        provider = JWTAuthProvider(secret_key="unused", jwks_cache=JWKSCache(""))

        assert await provider._decode_es256("dummy.token.value", {"alg": "ES256"}) is None

    async def test_returns_none_when_kid_unknown(self):
        jwks = JWKSCache(JWKS_URL)
        jwks.get_key = AsyncMock(return_value=None)  # type: ignore[method-assign]
        provider = JWTAuthProvider(secret_key="unused", jwks_cache=jwks)

        result = await provider._decode_es256("dummy", {"alg": "ES256", "kid": "missing"})

        assert result is None
        jwks.get_key.assert_awaited_once_with("missing")

    async def test_validate_token_uses_jwks_key_for_es256(self):
        user_id = str(uuid4())
        key_data = {"kid": "k1", "kty": "EC", "crv": "P-256"}
        jwks = JWKSCache(JWKS_URL)
        jwks.get_key = AsyncMock(return_value=key_data)  # type: ignore[method-assign]
        provider = JWTAuthProvider(secret_key="unused", jwks_cache=jwks)

        with (
            patch.object(jwt_provider_module, "ECKey") as mock_eckey_cls,
            patch.object(jwt_provider_module, "jwt") as mock_jwt,
        ):
            mock_jwt.get_unverified_header.return_value = {"alg": "ES256", "kid": "k1"}
            mock_jwt.decode.return_value = {
                "sub": user_id,
                "email": "es256user@example.com",
                "user_metadata": {"display_name": "ES256 User"},
                "role": "authenticated",
            }

            result = await provider.validate_token("es256.token.here")

        mock_eckey_cls.assert_called_once_with(key_data, algorithm="ES256")
        assert result is not None
        assert str(result.id) == user_id
        assert result.display_name == "ES256 User"
