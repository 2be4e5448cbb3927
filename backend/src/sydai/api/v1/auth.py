"""Authentication API v1 endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, EmailStr, Field, model_validator

from sydai.api.rate_limit import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import TokenResponse, User, UserAccount
from sydai.exceptions import PointsError
from sydai.logging_config import get_logger
from sydai.services import Services

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

WELCOME_NOTIFICATION_TITLE = "Welcome to SydAI!"
WELCOME_NOTIFICATION_MESSAGE = (
    "Start chatting and complete your daily check-in to earn points and climb the leaderboard."
)


# ==================== MODELS ====================


class RegisterRequest(BaseModel):
    """User registration request."""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str | None = None
    referral_code: str | None = Field(default=None, max_length=20)  # Optional referral code

    @model_validator(mode="after")
    def check_passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


def _token_response(services: Services, user: UserAccount) -> TokenResponse:
    return TokenResponse(
        access_token=services.auth.create_access_token(user),
        token_type="bearer",
        expires_in=services.auth.token_lifetime_seconds,
        user=User.model_validate(user),
    )


# ==================== ENDPOINTS ====================


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
async def register(
    request: Request,
    body: RegisterRequest,
    services: Services = Depends(get_services),
):
    """Register a new user account.

    Seeds the welcome message and notification. If ``referral_code`` is
    provided and still unused, the referrer earns the referral bonus; an
    unusable code does not block registration.
    """
    try:
        user = services.auth.create_user(
            email=body.email,
            username=body.username,
            password=body.password,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    services.messages.post_welcome(user.id)
    services.notifications.record(user.id, WELCOME_NOTIFICATION_TITLE, WELCOME_NOTIFICATION_MESSAGE)

    referrer_id = None
    if body.referral_code:
        try:
            referral = services.referral.complete_referral(body.referral_code, user.id)
            referrer_id = referral.referrer_id
        except PointsError as e:
            logger.warning(
                "registration_referral_ignored",
                user_id=user.id,
                referral_code=body.referral_code,
                reason=e.code,
            )

    logger.info("user_registered", user_id=user.id, referred_by=referrer_id)

    return _token_response(services, user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    services: Services = Depends(get_services),
):
    """Login with email and password.

    Returns JWT access token for authentication.
    """
    user = services.auth.authenticate(body.email, body.password)

    if not user:
        logger.warning(
            "login_failed",
            email=body.email,
            ip=request.client.host if request.client else "unknown",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    logger.info("user_logged_in", user_id=user.id)
    return _token_response(services, user)


@router.post("/logout")
async def logout(user: UserAccount = Depends(require_auth)):
    """Logout.

    Tokens are stateless; the client discards its token.
    """
    logger.info("user_logged_out", user_id=user.id)
    return {"success": True}


@router.get("/me", response_model=User)
async def get_me(user: UserAccount = Depends(require_auth)):
    """Get current user's profile, including points."""
    return User.model_validate(user)
