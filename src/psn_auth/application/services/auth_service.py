from typing import (
    Any,
    Callable
)

from psn_auth.application.services.token_manager import TokenLifecycleManager
from psn_auth.domain.gateway.token_gateway import TokenGateway
from psn_auth.domain.models.token import TokenRecord
from psn_auth.utils.clock import (
    now_timestamp,
    to_iso
)


class AuthService:
    def __init__(
        self,
        gateway: TokenGateway,
        manager: TokenLifecycleManager,
        clock: Callable[[], int] = now_timestamp
    ):
        self.__gateway = gateway
        self.__manager = manager
        self.__clock = clock

    async def authenticate_with_npsso(self, npsso: str, disable_manager: bool = False) -> TokenRecord:
        """
        Exchange a NPSSO for a token record.

        Unless `disable_manager` is set, the record also initializes the token
        manager so later calls to `get_access_token` refresh it automatically.
        """
        token = await self.__gateway.exchange_initial_credential(npsso)

        if not disable_manager:
            self.__manager.initialize_token(token)

        return token

    async def refresh(self, token: TokenRecord) -> TokenRecord:
        """Refresh a caller held record. The token manager is left untouched."""
        return await self.__gateway.exchange_refresh_token(token.refresh_token, token.refresh_expiry)

    def status(self) -> dict[str, Any]:
        if not self.__manager.is_initialized:
            return {"initialized": False}

        token = self.__manager.get_full_token()
        now = self.__clock()

        return {
            "initialized": True,
            "access_expired": token.access_expired(now),
            "refresh_expired": token.refresh_expired(now),
            "access_expiry": token.access_expiry,
            "access_expiry_iso": to_iso(token.access_expiry),
            "refresh_expiry": token.refresh_expiry,
            "refresh_expiry_iso": to_iso(token.refresh_expiry),
        }
