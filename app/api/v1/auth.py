"""
Authentication endpoints
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.core.errors import Unauthenticated
from app.core.security import verify_password, create_access_token
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Inactive accounts and accounts without a password cannot log in.
    """
    user = db.query(User).filter(User.username == login_data.username).first()

    if not user or not user.is_active:
        raise Unauthenticated("Invalid username or password")

    if user.password_hash is None or not verify_password(login_data.password, user.password_hash):
        raise Unauthenticated("Invalid username or password")

    # JWT 'sub' claim must be a string
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})
    logger.info("User %s logged in", user.id)

    return TokenResponse(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserOut)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Return the acting user"""
    return current_user
