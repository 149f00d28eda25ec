"""Merchant access tokens: Cognito RS256 via JWKS, or HS256 mock tokens locally."""

import time

import httpx
from jose import JWTError, jwt

from storefront.core.config import settings

JWKS_REFRESH_INTERVAL = 3600  # seconds
MOCK_TOKEN_TTL = 900


def cognito_issuer() -> str:
    return (
        f"https://cognito-idp.{settings.COGNITO_REGION}.amazonaws.com"
        f"/{settings.COGNITO_USER_POOL_ID}"
    )


class JwksCache:
    """Signing keys of the user pool, refetched hourly."""

    def __init__(self, refresh_interval: float = JWKS_REFRESH_INTERVAL):
        self.refresh_interval = refresh_interval
        self._keys: dict[str, dict] = {}
        self._fetched_at = 0.0

    async def _refresh(self) -> None:
        async with httpx.AsyncClient(timeout=settings.API_TIMEOUT) as client:
            resp = await client.get(f"{cognito_issuer()}/.well-known/jwks.json")
            resp.raise_for_status()
        self._keys = {k["kid"]: k for k in resp.json().get("keys", []) if "kid" in k}
        self._fetched_at = time.time()

    async def get(self, kid: str | None) -> dict:
        if not self._keys or time.time() - self._fetched_at > self.refresh_interval:
            await self._refresh()
        try:
            return self._keys[kid]
        except KeyError:
            raise JWTError("Key not found in JWKS") from None


jwks_cache = JwksCache()


async def decode_access_token(token: str) -> dict:
    """Verified claims of a merchant access token."""
    if settings.COGNITO_MOCK:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=["HS256"],
            options={"verify_aud": False, "verify_iss": False},
        )

    key = await jwks_cache.get(jwt.get_unverified_header(token).get("kid"))
    claims = jwt.decode(
        token,
        key,
        algorithms=["RS256"],
        audience=settings.COGNITO_CLIENT_ID,
        issuer=cognito_issuer(),
        options={"verify_at_hash": False},
    )
    if claims.get("token_use") != "access":
        raise JWTError("Not an access token")
    return claims


def create_mock_access_token(
    sub: str,
    email: str = "test@example.com",
    expires_in: int = MOCK_TOKEN_TTL,
) -> str:
    """Token accepted while COGNITO_MOCK is on (local dev and tests)."""
    now = int(time.time())
    payload = {
        "sub": sub,
        "email": email,
        "token_use": "access",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
