"""Cobalt auto-login endpoints: exchange an external token for an admin session."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from src.cobalt_cms.api.http.deps import (
    get_admin_session_service,
    get_admin_user_repository,
    get_auto_login_service,
)
from src.cobalt_cms.core.exceptions import (
    AccessDeniedError,
    InactiveIdentityError,
    SessionTokenError,
    TokenDecodeError,
    TokenExpiredError,
)
from src.cobalt_cms.core.services.auto_login import AutoLoginService
from src.cobalt_cms.core.services.session.admin_session import AdminSessionService
from src.cobalt_cms.entities.core.admin_user import AdminUserRepository

router = APIRouter(tags=["auto-login"])


class AutoLoginRequest(BaseModel):
    """Body of the auto-login call. Fields are optional so absence maps to 400."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    cobalt_token: str | None = Field(default=None, alias="cobaltToken")
    password: str | None = Field(default=None, repr=False)


class AutoLoginUser(BaseModel):
    id: str
    email: str
    firstname: str | None = None
    lastname: str | None = None
    username: str | None = None


class AutoLoginResponse(BaseModel):
    success: bool = True
    message: str
    created: bool
    user: AutoLoginUser


class CheckAuthUser(BaseModel):
    id: str
    email: str
    firstname: str | None = None
    lastname: str | None = None


class CheckAuthResponse(BaseModel):
    authenticated: bool
    user: CheckAuthUser | None = None


@router.post("/auto-login", response_model=AutoLoginResponse)
async def auto_login(
    body: AutoLoginRequest,
    response: Response,
    auto_login_service: AutoLoginService = Depends(get_auto_login_service),
    session_service: AdminSessionService = Depends(get_admin_session_service),
) -> AutoLoginResponse:
    """Validate a Cobalt token, provision the administrator if needed and log them in."""
    if not body.email:
        raise HTTPException(status_code=400, detail="Email is required")
    if not body.cobalt_token:
        raise HTTPException(status_code=400, detail="Cobalt token is required")

    try:
        result = auto_login_service.login(body.email, body.cobalt_token)
    except TokenDecodeError:
        raise HTTPException(status_code=401, detail="Invalid Cobalt token") from None
    except TokenExpiredError:
        raise HTTPException(status_code=401, detail="Cobalt token has expired") from None
    except AccessDeniedError:
        raise HTTPException(status_code=403, detail="User does not have CMS permissions") from None
    except InactiveIdentityError:
        raise HTTPException(status_code=401, detail="User account is disabled") from None
    except Exception:
        logger.exception(f"Auto-login failed for {body.email}")
        raise HTTPException(status_code=500, detail="Auto-login failed") from None

    session_service.attach_cookie(response, result.credential)
    await session_service.store_session(response, result.user, result.credential)

    user = result.user
    return AutoLoginResponse(
        message=result.message,
        created=result.created,
        user=AutoLoginUser(
            id=user.id,
            email=user.email,
            firstname=user.firstname,
            lastname=user.lastname,
            username=user.username,
        ),
    )


@router.get("/check-auth", response_model=CheckAuthResponse, response_model_exclude_none=True)
async def check_auth(
    request: Request,
    session_service: AdminSessionService = Depends(get_admin_session_service),
    user_repo: AdminUserRepository = Depends(get_admin_user_repository),
) -> CheckAuthResponse:
    """Report whether the caller holds a valid admin session. Never fails."""
    try:
        credential = await session_service.resolve_credential(request)
        if not credential:
            return CheckAuthResponse(authenticated=False)

        user = user_repo.get(session_service.admin_user_id(credential))
        if user is None or not user.is_active:
            return CheckAuthResponse(authenticated=False)
    except SessionTokenError:
        return CheckAuthResponse(authenticated=False)
    except Exception:
        logger.exception("check-auth failed")
        return CheckAuthResponse(authenticated=False)

    return CheckAuthResponse(
        authenticated=True,
        user=CheckAuthUser(
            id=user.id,
            email=user.email,
            firstname=user.firstname,
            lastname=user.lastname,
        ),
    )
