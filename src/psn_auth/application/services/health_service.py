from datetime import (
    datetime,
    timezone
)

from psn_auth.application.services.token_manager import TokenLifecycleManager
from psn_auth.config.settings import Settings


class HealthService:
    def __init__(self, settings: Settings, manager: TokenLifecycleManager):
        self.__settings = settings
        self.__manager = manager

    def get_health(self) -> dict[str, str | bool]:
        return {
            "status": "ok",
            "service": self.__settings.SERVICE_NAME,
            "token_manager_initialized": self.__manager.is_initialized,
            "ts_utc": datetime\
                        .now(timezone.utc)
                        .isoformat(timespec="seconds")
                        .replace("+00:00","Z")
        }
