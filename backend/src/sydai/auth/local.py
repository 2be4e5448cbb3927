"""Local authentication service (email/password)."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from sydai.auth.models import UserAccount
from sydai.logging_config import get_logger
from sydai.settings import Settings
from sydai.storage.db import Database

logger = get_logger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

JWT_ALGORITHM = "HS256"


class LocalAuthService:
    """Authentication service for local (email/password) users."""

    def __init__(self, db: Database, config: Settings):
        """Initialize auth service.

        Args:
            db: Database holding user accounts
            config: Settings providing the JWT secret and lifetime
        """
        self.db = db
        self.jwt_secret_key = config.jwt_secret_key
        self.jwt_expire_hours = config.jwt_expire_hours
        self.logger = get_logger(__name__)

    # ==================== PASSWORD ====================

    def _truncate_password(self, password: str) -> str:
        """Truncate password to 72 bytes (bcrypt limit)."""
        return password.encode('utf-8')[:72].decode('utf-8', errors='ignore')

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(self._truncate_password(password))

    def verify_password(self, password: str, hashed: str) -> bool:
        return pwd_context.verify(self._truncate_password(password), hashed)

    # ==================== USER MANAGEMENT ====================

    def create_user(self, email: str, username: str, password: str) -> UserAccount:
        """Create a new local user.

        Args:
            email: User email
            username: Public display name, unique
            password: Plain password

        Returns:
            Created user account

        Raises:
            ValueError: If email or username already exists
        """
        email = email.strip().lower()
        username = username.strip()

        try:
            with self.db.session() as session:
                if session.scalar(select(UserAccount.id).where(UserAccount.email == email)) is not None:
                    raise ValueError("Email already registered")

                if session.scalar(select(UserAccount.id).where(UserAccount.username == username)) is not None:
                    raise ValueError("Username already taken")

                user = UserAccount(
                    email=email,
                    username=username,
                    password_hash=self.hash_password(password),
                    points=0,
                )
                session.add(user)
                session.flush()
        except IntegrityError as e:
            # Registered concurrently with the same email or username
            raise ValueError("Email or username already registered") from e

        self.logger.info("user_created", user_id=user.id, username=username)
        return user

    def authenticate(self, email: str, password: str) -> UserAccount | None:
        """Authenticate a user.

        Returns:
            User account if valid, None otherwise
        """
        user = self.get_user_by_email(email)
        if not user:
            return None

        if not self.verify_password(password, user.password_hash):
            return None

        self.logger.info("user_authenticated", user_id=user.id)
        return user

    def get_user_by_id(self, user_id: int) -> UserAccount | None:
        with self.db.session() as session:
            return session.get(UserAccount, user_id)

    def get_user_by_email(self, email: str) -> UserAccount | None:
        with self.db.session() as session:
            return session.scalars(
                select(UserAccount).where(UserAccount.email == email.strip().lower())
            ).first()

    # ==================== JWT TOKENS ====================

    @property
    def token_lifetime_seconds(self) -> int:
        return self.jwt_expire_hours * 3600

    def create_access_token(
        self,
        user: UserAccount,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create JWT access token.

        Args:
            user: User account
            expires_delta: Optional expiration time

        Returns:
            JWT token string
        """
        if expires_delta is None:
            expires_delta = timedelta(hours=self.jwt_expire_hours)

        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "exp": now + expires_delta,
            "iat": now,
        }

        return jwt.encode(payload, self.jwt_secret_key, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str) -> dict[str, Any] | None:
        """Verify and decode JWT token.

        Returns:
            Token payload or None if invalid
        """
        try:
            return jwt.decode(token, self.jwt_secret_key, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            self.logger.debug("token_verification_failed", error=str(e))
            return None

    def get_user_from_token(self, token: str) -> UserAccount | None:
        """Get user from JWT token."""
        payload = self.verify_token(token)
        if not payload:
            return None

        user_id = payload.get("sub")
        if not user_id or not str(user_id).isdigit():
            return None

        return self.get_user_by_id(int(user_id))
