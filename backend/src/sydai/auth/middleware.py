"""Authentication middleware and service dependencies for FastAPI."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sydai.auth.models import UserAccount
from sydai.logging_config import get_logger
from sydai.services import Services

logger = get_logger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Services container built by ``create_app``."""
    return request.app.state.services


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    services: Services = Depends(get_services),
) -> UserAccount | None:
    """Get current authenticated user.

    Returns:
        User account or None if not authenticated
    """
    if not credentials:
        return None

    user = services.auth.get_user_from_token(credentials.credentials)
    if user:
        # Store user in request state for later use
        request.state.user = user

    return user


def require_auth(user: UserAccount | None = Depends(get_current_user)) -> UserAccount:
    """Require authentication - raises 401 if not authenticated.

    Raises:
        HTTPException: 401 if not authenticated
    """
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
