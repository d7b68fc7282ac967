"""
JWKS Token Verifier
Validates bearer JWTs against the identity provider's published key set
"""
import asyncio
import time
from typing import Any, Dict, Optional

import httpx
from jose import jwt, JWTError
from loguru import logger

from core.config import settings
from core.exceptions import AuthenticationException, IdentityProviderException
from application.services.auth.interfaces import ITokenVerifier


class JwksTokenVerifier(ITokenVerifier):
    """Verifies tokens with keys fetched from a JWKS endpoint

    The key set is cached for JWKS_CACHE_TTL_SECONDS. Every key of the set
    is tried, so tokens without a 'kid' header are accepted.
    """

    def __init__(
        self,
        jwks_url: Optional[str] = None,
        cache_ttl_seconds: Optional[int] = None,
        algorithms: Optional[list] = None,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        timeout: float = 10.0
    ):
        self.jwks_url = jwks_url or settings.AUTH_JWKS_URL
        self.cache_ttl_seconds = cache_ttl_seconds if cache_ttl_seconds is not None else settings.JWKS_CACHE_TTL_SECONDS
        self.algorithms = algorithms or settings.JWT_ALGORITHMS
        self.audience = audience if audience is not None else settings.JWT_AUDIENCE
        self.issuer = issuer if issuer is not None else settings.JWT_ISSUER
        self.timeout = timeout

        self._jwks: Optional[Dict[str, Any]] = None
        self._fetched_at: float = 0.0
        self._lock = asyncio.Lock()

    async def verify_token(self, token: str) -> str:
        jwks = await self._get_jwks()
        try:
            claims = self._decode(token, jwks)
        except JWTError as e:
            # Keys may have rotated since the cache was filled
            if not self._fetched_recently():
                logger.info("Token rejected with cached JWKS, refreshing key set")
                jwks = await self._get_jwks(force_refresh=True)
                try:
                    claims = self._decode(token, jwks)
                except JWTError as retry_error:
                    logger.warning(f"JWT verification failed: {retry_error}")
                    raise AuthenticationException("Invalid or expired token")
            else:
                logger.warning(f"JWT verification failed: {e}")
                raise AuthenticationException("Invalid or expired token")

        subject = claims.get("sub")
        if not subject:
            logger.warning("JWT without subject claim rejected")
            raise AuthenticationException("Token has no subject")

        logger.debug(f"Token validated - subject: {subject}, issuer: {claims.get('iss')}")
        return str(subject)

    def _decode(self, token: str, jwks: Dict[str, Any]) -> Dict[str, Any]:
        return jwt.decode(
            token,
            jwks,
            algorithms=self.algorithms,
            audience=self.audience,
            issuer=self.issuer,
            options={"verify_aud": self.audience is not None},
        )

    def _cache_is_fresh(self) -> bool:
        return self._jwks is not None and time.monotonic() - self._fetched_at < self.cache_ttl_seconds

    def _fetched_recently(self, seconds: float = 60.0) -> bool:
        return self._jwks is not None and time.monotonic() - self._fetched_at < seconds

    async def _get_jwks(self, force_refresh: bool = False) -> Dict[str, Any]:
        if not force_refresh and self._cache_is_fresh():
            return self._jwks

        async with self._lock:
            if not force_refresh and self._cache_is_fresh():
                return self._jwks

            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.jwks_url)
                    response.raise_for_status()
                    jwks = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"❌ Error fetching JWKS from {self.jwks_url}: {e}")
                if self._jwks is not None:
                    logger.warning("Using stale JWKS after refresh failure")
                    return self._jwks
                raise IdentityProviderException("Could not retrieve token signing keys")

            if not isinstance(jwks, dict) or not jwks.get("keys"):
                logger.error(f"❌ JWKS document at {self.jwks_url} has no keys")
                raise IdentityProviderException("Token signing key set is empty")

            self._jwks = jwks
            self._fetched_at = time.monotonic()
            logger.info(f"🔑 JWKS loaded: {len(jwks['keys'])} key(s)")
            return jwks
