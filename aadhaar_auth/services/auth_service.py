"""
aadhaar_auth/services/auth_service.py

Purpose: Sign-up, login and profile logic

- Sign-up: confirm password, hash, single insert
- Login: email lookup, password check, token issuance
- Profile: token check, lookup by id without the password
- Client-facing failures use fixed messages; sign-up and login collapse
  everything else to a generic retry message, profile to "Invalid token"
"""

from typing import Optional

from aadhaar_auth.core.context import AppContext
from aadhaar_auth.core.errors import surface_failures
from aadhaar_auth.core.exceptions import AuthenticationError, InvalidTokenError, ValidationError
from aadhaar_auth.core.logging import get_logger, LogContext
from aadhaar_auth.models.user import new_user_document, to_profile
from aadhaar_auth.schemas.auth import LoginRequest, SignupRequest, UserProfile

logger = get_logger(__name__)

SIGNUP_SUCCESS = "User signed up successfully"
SIGNUP_FAILED = "Error signing up. Please try again."
PASSWORD_MISMATCH = "Passwords do not match"

LOGIN_SUCCESS = "Login successful"
LOGIN_FAILED = "Error logging in. Please try again."
INVALID_CREDENTIALS = "Invalid credentials"

ACCESS_DENIED = "Access denied"
INVALID_TOKEN = "Invalid token"

BEARER_PREFIX = "bearer "


async def signup(ctx: AppContext, request: SignupRequest) -> str:
    """
    Registers a new user.

    Returns:
        The new user's id

    Raises:
        ValidationError: password and confirm_password differ
        ConflictError: email, mobile number or Aadhaar number already taken
        UnexpectedError: any other failure
    """
    if request.password != request.confirm_password:
        raise ValidationError(PASSWORD_MISMATCH)

    with LogContext(operation="signup"), surface_failures("signup", SIGNUP_FAILED):
        password_hash = await ctx.credentials.hash(request.password)
        user_id = await ctx.users.create_user(new_user_document(request, password_hash))

    logger.info("User signed up", extra={"user_id": user_id})
    return user_id


async def login(ctx: AppContext, request: LoginRequest) -> str:
    """
    Checks credentials and issues a session token.

    Unknown email and wrong password fail identically.

    Returns:
        Signed session token

    Raises:
        AuthenticationError: credentials do not match a user
        UnexpectedError: store or token failure
    """
    with LogContext(operation="login"), surface_failures("login", LOGIN_FAILED):
        user = await ctx.users.find_by_email(request.email)
        if user is None:
            await ctx.credentials.burn(request.password)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not await ctx.credentials.verify(request.password, user["password"]):
            raise AuthenticationError(INVALID_CREDENTIALS)

        user_id = str(user["_id"])
        token = ctx.tokens.issue(user_id, user["email"])

    logger.info("Login successful", extra={"user_id": user_id})
    return token


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pulls the token out of an authorization header value.

    Accepts a bare token or the "Bearer <token>" form.
    """
    if not authorization:
        return None
    value = authorization.strip()
    if value.lower().startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    return value or None


async def get_profile(ctx: AppContext, authorization: Optional[str]) -> Optional[UserProfile]:
    """
    Resolves the user behind a session token.

    Returns:
        The user's profile, or None when the token's user no longer exists

    Raises:
        AuthenticationError: header missing, token rejected, or the user
            behind the token could not be loaded
    """
    token = extract_token(authorization)
    if token is None:
        raise AuthenticationError(ACCESS_DENIED)

    try:
        claims = ctx.tokens.verify(token)
    except InvalidTokenError as exc:
        logger.info(f"Token rejected: {exc.message}", extra={"operation": "profile"})
        raise AuthenticationError(INVALID_TOKEN) from exc

    user_id = str(claims["userId"])
    with LogContext(operation="profile", user_id=user_id):
        try:
            document = await ctx.users.find_by_id(user_id)
            if document is None:
                # Still a 200, with a null body
                logger.warning("Token refers to a missing user")
                return None
            return to_profile(document)
        except Exception as exc:
            logger.error(f"profile failed: {exc}", exc_info=True)
            raise AuthenticationError(INVALID_TOKEN) from exc
