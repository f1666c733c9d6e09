"""
Authentication API endpoints.

Handles user registration, login and profile management with JWT tokens.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.db.session import get_db
from app.models import User
from app.schemas import ProfileUpdate, UserLogin, UserPublic, UserRegister
from app.services import identity

router = APIRouter()

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


# ============== Dependencies ==============


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises AuthenticationError if the token is missing or invalid or the
    user no longer exists.
    """
    return identity.verify_credential(db, token, settings)


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Optional[User]:
    """Like get_current_user, but anonymous requests resolve to None."""
    if not token:
        return None
    return identity.verify_credential(db, token, settings)


# ============== API Endpoints ==============


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new user.

    Job seekers may send a ``profile``, employers a ``company``; the
    sub-record that does not match the role is dropped.
    """
    token, user = identity.register(db, user_data, settings)

    return {
        "success": True,
        "message": "User registered successfully",
        "token": token,
        "user": UserPublic.model_validate(user),
    }


@router.post("/login")
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Login with email and password and get a JWT access token."""
    token, user = identity.login(db, credentials.email, credentials.password, settings)

    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": UserPublic.model_validate(user),
    }


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user profile.

    Requires valid JWT token in Authorization header.
    """
    return {"success": True, "user": UserPublic.model_validate(current_user)}


@router.put("/profile")
def update_profile(
    patch: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = identity.update_profile(db, current_user, patch)

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": UserPublic.model_validate(user),
    }


@router.get("/check")
async def check(current_user: User = Depends(get_current_user)):
    """Confirm the bearer token is accepted."""
    return {
        "success": True,
        "message": "Authentication is working",
        "user": {
            "id": current_user.id,
            "name": current_user.name,
            "role": current_user.role,
        },
    }
