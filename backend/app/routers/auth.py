"""
Authentication router.

One configured admin account logs in with username and password and gets
back a signed bearer token for the write routes.
"""

from fastapi import APIRouter, Body, Depends, Request, status

from meapi.errors import AppError, ErrorCode
from meapi.logging import get_logger

from ..auth.credentials import authenticate
from ..auth.dependencies import get_client_ip
from ..auth.jwt import create_access_token
from ..dependencies.rate_limit import enforce_auth_rate_limit
from ..schemas import LoginRequest, LoginResponse

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(enforce_auth_rate_limit)],
)
def login(request: Request, payload: LoginRequest | None = Body(default=None)):
    """
    Exchange the admin credentials for a JWT.

    Errors:
        400 MISSING_CREDENTIALS: body, username or password absent or blank
        401 INVALID_CREDENTIALS: unknown username or wrong password
    """
    payload = payload or LoginRequest()
    username = (payload.username or "").strip()
    password = payload.password or ""
    client_ip = get_client_ip(request)

    if not username or not password:
        raise AppError(
            "Username and password are required",
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.MISSING_CREDENTIALS,
        )

    account = authenticate(username, password)
    if account is None:
        logger.warning("login_failed", username=username[:50], ip=client_ip)
        raise AppError(
            "Invalid credentials",
            status_code=status.HTTP_401_UNAUTHORIZED,
            code=ErrorCode.INVALID_CREDENTIALS,
        )

    token = create_access_token(
        {
            "sub": str(account.id),
            "id": account.id,
            "username": account.username,
            "role": account.role,
        }
    )
    logger.info("login_succeeded", user_id=account.id, username=account.username, ip=client_ip)
    return {
        "message": "Login successful",
        "token": token,
        "user": account.public_dict(),
    }
