# File: app/api/v1/endpoints/auth.py
from typing import Any, Optional
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.core import security
from app.db.database import get_db
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=schemas.LoginResponse)
def login_access_token(
    login_data: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> Any:
    """Exchange a user name and password for a 24-hour bearer token."""
    user = crud.user.authenticate(db, user_name=login_data.user_name, password=login_data.password)

    if not user:
        # Same answer for unknown user and wrong password
        logger.info(f"Failed login for user name '{login_data.user_name}'")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "error": "Invalid username or password"},
        )

    token = security.create_access_token(subject=user.id, user_name=user.user_name)
    logger.info(f"User {user.id} logged in")

    return {
        "success": True,
        "token": token,
        "user": schemas.UserPublic.model_validate(user),
    }


@router.get("/verify", response_model=security.TokenVerification)
def verify_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(deps.security),
) -> Any:
    """Signature and expiry check only; no server-side revocation."""
    if credentials is None:
        return security.TokenVerification(valid=False)
    return security.verify_token(credentials.credentials)
