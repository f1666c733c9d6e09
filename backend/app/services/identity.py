"""
Identity & credentials: registration, login, token verification and
profile updates.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from app.core.security import create_access_token, get_token_subject
from app.db.session import commit_or_fail
from app.models import User
from app.models.user import EMPLOYER, JOBSEEKER, ROLES
from app.schemas import ProfileUpdate, UserRegister

logger = logging.getLogger("identity")

MIN_PASSWORD_LENGTH = 6
INVALID_LOGIN_MESSAGE = "Invalid email or password"


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address (case-insensitive)."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def issue_token(user: User, settings: Settings) -> str:
    return create_access_token(data={"sub": str(user.id)}, settings=settings)


def register(db: Session, data: UserRegister, settings: Settings) -> tuple[str, User]:
    """
    Create an account and return a session token for it.

    Only the sub-record matching the role is stored.
    """
    if not data.name or not data.email or not data.password:
        raise ValidationError("Please provide name, email, and password")
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if data.role not in ROLES:
        raise ValidationError("Role must be 'jobseeker' or 'employer'")

    if get_user_by_email(db, data.email):
        raise ConflictError("User with this email already exists")

    user = User(name=data.name, email=data.email, role=data.role)
    user.set_password(data.password)
    if data.role == JOBSEEKER and data.profile is not None:
        user.profile = data.profile.model_dump()
    elif data.role == EMPLOYER and data.company is not None:
        user.company = data.company.model_dump()

    db.add(user)
    try:
        commit_or_fail(db, "Server error during registration")
    except IntegrityError as e:
        # Lost a race against a concurrent registration with the same email
        raise ConflictError("Email already exists") from e
    db.refresh(user)

    logger.info(f"Registered {user.role} user {user.id}")
    return issue_token(user, settings), user


def login(db: Session, email: str, password: str, settings: Settings) -> tuple[str, User]:
    """Authenticate by email and password, returning a fresh session token."""
    if not email or not password:
        raise ValidationError("Please provide email and password")

    user = get_user_by_email(db, email)
    # Same message for unknown email and wrong password
    if user is None or not user.check_password(password):
        raise AuthenticationError(INVALID_LOGIN_MESSAGE)

    return issue_token(user, settings), user


def verify_credential(db: Session, token: Optional[str], settings: Settings) -> User:
    """Resolve a bearer token to the user it was issued for."""
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    subject = get_token_subject(token, settings)
    if subject is None:
        raise AuthenticationError("Invalid or expired token.")

    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token.") from None

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Token is valid but user no longer exists.")
    return user


def update_profile(db: Session, actor: User, patch: ProfileUpdate) -> User:
    """
    Apply a partial profile update.

    Only the name and the sub-record matching the actor's role are touched;
    ``role`` and the other role's sub-record are ignored.
    """
    if patch.name is not None:
        name = patch.name.strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        actor.name = name

    if actor.role == JOBSEEKER and patch.profile is not None:
        actor.profile = {**(actor.profile or {}), **patch.profile.model_dump(exclude_unset=True)}
    elif actor.role == EMPLOYER and patch.company is not None:
        actor.company = {**(actor.company or {}), **patch.company.model_dump(exclude_unset=True)}

    commit_or_fail(db, "Server error updating profile")
    db.refresh(actor)

    return actor
