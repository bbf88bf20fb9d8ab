from fastapi import (
    APIRouter,
    Depends,
    HTTPException
)
from pydantic import BaseModel

from psn_auth.application.services.auth_service import AuthService
from psn_auth.application.services.token_manager import TokenLifecycleManager
from psn_auth.domain.errors import (
    AuthError,
    AuthErrorKind
)
from psn_auth.domain.models.token import TokenRecord
from psn_auth.utils.provider import (
    get_auth_service,
    get_token_manager
)

router = APIRouter(prefix="/auth", tags=["auth"])

ERROR_STATUS = {
    AuthErrorKind.NOT_INITIALIZED      : 409,
    AuthErrorKind.EXPIRED_REFRESH_TOKEN: 401,
    AuthErrorKind.INVALID_CREDENTIAL   : 401,
    AuthErrorKind.INVALID_INPUT        : 400,
    AuthErrorKind.MALFORMED_RESPONSE   : 502,
    AuthErrorKind.EXCHANGE_FAILED      : 502,
}


class NpssoLogin(BaseModel):
    npsso          : str
    disable_manager: bool = False


def to_http(error: AuthError) -> HTTPException:
    return HTTPException(status_code=ERROR_STATUS[error.kind], detail=error.to_dict())


@router.post("/npsso", response_model=TokenRecord)
async def login_with_npsso(body: NpssoLogin, service: AuthService = Depends(get_auth_service)):
    try:
        return await service.authenticate_with_npsso(body.npsso, disable_manager=body.disable_manager)
    except AuthError as e:
        raise to_http(e) from e


@router.get("/status")
def auth_status(service: AuthService = Depends(get_auth_service)):
    return service.status()


@router.get("/token", response_model=TokenRecord)
def full_token(manager: TokenLifecycleManager = Depends(get_token_manager)):
    try:
        return manager.get_full_token()
    except AuthError as e:
        raise to_http(e) from e


@router.get("/access-token")
async def access_token(manager: TokenLifecycleManager = Depends(get_token_manager)):
    try:
        return {"access_token": await manager.get_access_token()}
    except AuthError as e:
        raise to_http(e) from e
