"""
aadhaar_auth/api/auth.py

Purpose: Sign-up, login and profile endpoints

- Parses and validates request bodies into DTOs
- Delegates to the auth service
- Shapes success responses; failures are mapped by the exception handlers
"""

from fastapi import APIRouter, Depends, Header, status
from typing import Optional

from aadhaar_auth.api.dependencies import get_context
from aadhaar_auth.core.context import AppContext
from aadhaar_auth.core.logging import get_logger
from aadhaar_auth.schemas.auth import LoginRequest, LoginResponse, SignupRequest, UserProfile
from aadhaar_auth.schemas.response import MessageResponse
from aadhaar_auth.services import auth_service

logger = get_logger(__name__)
router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def signup(request: SignupRequest, ctx: AppContext = Depends(get_context)):
    """
    Registers a user. No token is issued here; clients log in afterwards.
    """
    await auth_service.signup(ctx, request)
    return MessageResponse(message=auth_service.SIGNUP_SUCCESS)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, ctx: AppContext = Depends(get_context)):
    """Exchange email and password for a one-hour session token."""
    token = await auth_service.login(ctx, request)
    return LoginResponse(message=auth_service.LOGIN_SUCCESS, token=token)


@router.get("/profile", response_model=Optional[UserProfile])
async def profile(
    authorization: Optional[str] = Header(None),
    ctx: AppContext = Depends(get_context),
):
    """
    Returns the caller's profile without the password.

    The token goes in the `authorization` header, bare or as `Bearer <token>`.
    """
    return await auth_service.get_profile(ctx, authorization)
