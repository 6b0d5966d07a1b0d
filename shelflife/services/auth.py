"""Account service: JWT tokens, password hashing and onboarding profile."""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from shelflife.config import get_settings
from shelflife.models.user import User
from shelflife.schemas.user import OnboardingUpdate

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token carrying the user id as ``sub``."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    claims = {"sub": str(user_id), "email": email, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token; None when invalid or expired."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the user when the email and password match."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    """Create a new user who still has to complete onboarding."""
    user = User(
        email=normalize_email(email),
        password_hash=get_password_hash(password),
        name=name,
        dietary_preferences=[],
        cooking_goals=[],
        onboarding_completed=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_onboarding(db: Session, user: User, data: OnboardingUpdate) -> User:
    """Store the user's cooking profile answers."""
    user.household_size = data.household_size
    user.dietary_preferences = list(data.dietary_preferences)
    user.cooking_style = data.cooking_style
    user.cooking_goals = list(data.cooking_goals)
    user.onboarding_completed = data.onboarding_completed
    db.commit()
    db.refresh(user)
    return user
