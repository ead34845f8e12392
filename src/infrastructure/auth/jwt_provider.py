"""JWT authentication provider implementation.

Supports both Keycloak-issued JWTs (RS256 via the realm JWKS) and
locally-created tokens (HS256 for tests).

Keycloak access token payload structure:
    {
        "sub": "f9c1...-subject-id",
        "email": "user@example.com",
        "preferred_username": "jdoe",
        "name": "John Doe",
        "realm_access": { "roles": ["default-roles-master"] },
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from the Keycloak realm."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.keycloak_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
            # Build a kid -> key mapping
            _jwks_cache = {}
            for key_data in jwks_data.get("keys", []):
                kid = key_data.get("kid")
                if kid:
                    _jwks_cache[kid] = key_data
            logger.info("jwks_fetched", key_count=len(_jwks_cache))
            return _jwks_cache
    except Exception:
        logger.exception("jwks_fetch_failed", jwks_url=jwks_url)
        return {}


class JWTAuthProvider:
    """JWT-based authentication provider.

    Handles validation of both Keycloak-issued (RS256) and
    locally-created (HS256) JWTs.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        audience: str = settings.keycloak_audience,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._audience = audience

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract the caller identity.

        Detects the signing algorithm from the token header:
        - RS256 (Keycloak): validates via JWKS public key
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "RS256":
                payload = await self._validate_rs256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )

            if payload is None:
                return None

            subject = payload.get("sub")
            if not subject:
                return None

            return TokenUser(
                id=subject,
                email=payload.get("email") or None,
                display_name=payload.get("name") or payload.get("preferred_username"),
                role=payload.get("role"),
            )

        except JWTError:
            return None

    async def _validate_rs256(self, token: str, header: dict) -> Optional[dict]:
        """Validate an RS256-signed JWT using the realm JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Key not found, refetch once in case the realm rotated keys
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("jwks_key_not_found", kid=kid)
                return None

        options = {"verify_aud": bool(self._audience)}
        return jwt.decode(
            token,
            key_data,
            algorithms=["RS256"],
            audience=self._audience or None,
            issuer=settings.keycloak_issuer or None,
            options=options,
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user (HS256, used for tests).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.id,
            "email": user.email,
            "name": user.display_name,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
