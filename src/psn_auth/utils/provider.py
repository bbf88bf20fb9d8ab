from functools import lru_cache

from psn_auth.application.services.auth_service import AuthService
from psn_auth.application.services.health_service import HealthService
from psn_auth.application.services.token_manager import TokenLifecycleManager
from psn_auth.config.settings import Settings
from psn_auth.domain.gateway.token_gateway import TokenGateway
from psn_auth.domain.repository.token_repository import TokenRepository
from psn_auth.infra.client.psn_client import PsnTokenGateway
from psn_auth.infra.persistence.token_repository_memory import MemoryTokenRepository


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def get_repository() -> TokenRepository:
    return MemoryTokenRepository()


@lru_cache(maxsize=1)
def get_gateway() -> TokenGateway:
    return PsnTokenGateway(get_settings())


@lru_cache(maxsize=1)
def get_token_manager() -> TokenLifecycleManager:
    return TokenLifecycleManager(get_gateway(), get_repository())


def get_health_service() -> HealthService:
    return HealthService(get_settings(), get_token_manager())


def get_auth_service() -> AuthService:
    return AuthService(get_gateway(), get_token_manager())
