"""
Admin Token Check

Every admin endpoint depends on require_admin(). The Authorization header
must carry the configured token, either bare or as "Bearer <token>".
An empty configured token rejects every admin request.
"""

import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request, status


def extract_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if credentials and scheme.lower() == "bearer":
        return credentials.strip()
    return authorization.strip()


def is_admin(authorization: Optional[str], admin_token: str) -> bool:
    token = extract_token(authorization)
    if not admin_token or token is None:
        return False
    return secrets.compare_digest(token.encode(), admin_token.encode())


async def require_admin(
    request: Request,
    authorization: Optional[str] = Header(default=None)
) -> None:
    """
    FastAPI dependency rejecting requests without the admin token.

    Raises:
        HTTPException 401: If the header is missing or the token is wrong
    """
    if not is_admin(authorization, request.app.state.settings.admin_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
