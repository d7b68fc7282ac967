"""
Authentication Service Interfaces
Abstract base classes for authentication services
"""
from abc import ABC, abstractmethod


class ITokenVerifier(ABC):
    """Bearer token verification interface"""

    @abstractmethod
    async def verify_token(self, token: str) -> str:
        """
        Verify a bearer token and return its subject identifier

        Raises:
            AuthenticationException for invalid or expired tokens
            IdentityProviderException if signing keys cannot be retrieved
        """
        pass
