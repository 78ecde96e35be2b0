"""
API middleware for authentication concerns.
The service does not authenticate users itself; it forwards the caller's
bearer token to the HR backend, which does.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

security = HTTPBearer()


async def require_bearer_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    Dependency returning the caller's bearer token.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(token: str = Depends(require_bearer_token)):
            ...

    Raises:
        HTTPException: If no bearer token was sent (raised by HTTPBearer)
    """
    return credentials.credentials
