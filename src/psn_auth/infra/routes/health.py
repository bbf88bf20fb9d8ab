from fastapi import (
    APIRouter,
    Depends
)

from psn_auth.application.services.health_service import HealthService
from psn_auth.utils.provider import get_health_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health(service: HealthService = Depends(get_health_service)):
    return service.get_health()
