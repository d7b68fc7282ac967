"""
FastAPI Dependencies
Bearer-token authentication
"""
from typing import Optional

from fastapi import Depends, HTTPException, status, Header
from loguru import logger

from application.services.auth.interfaces import ITokenVerifier
from core.exceptions import AuthenticationException
from .container import get_token_verifier


async def get_current_owner(
    authorization: Optional[str] = Header(None),
    verifier: ITokenVerifier = Depends(get_token_verifier)
) -> str:
    """
    Resolve the owner identifier (token subject) from the bearer token

    Usage:
        @router.get("/protected")
        async def protected_route(owner_id: str = Depends(get_current_owner)):
            ...
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await verifier.verify_token(parts[1])
    except AuthenticationException as e:
        logger.info(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
