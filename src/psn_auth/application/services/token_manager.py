import asyncio
import logging

from typing import Callable

from psn_auth.domain.errors import (
    AuthError,
    ExchangeFailedError,
    ExpiredRefreshTokenError,
    InvalidInputError,
    NotInitializedError
)
from psn_auth.domain.gateway.token_gateway import TokenGateway
from psn_auth.domain.models.token import TokenRecord
from psn_auth.domain.repository.token_repository import TokenRepository
from psn_auth.infra.persistence.token_repository_memory import MemoryTokenRepository
from psn_auth.utils.clock import now_timestamp

logger = logging.getLogger(__name__)


class TokenLifecycleManager:
    """
    Keeps one token record and hands out a valid access token, refreshing it
    through the gateway when it is stale.

    Its lifetime is bounded by the refresh token (60 days on PSN). Once that
    expires a new NPSSO is needed and the manager must be initialized again.

    Refreshes are single-flight: callers that find a stale token while another
    caller is refreshing wait for that refresh instead of starting their own.
    """

    def __init__(
        self,
        gateway: TokenGateway,
        repository: TokenRepository | None = None,
        clock: Callable[[], int] = now_timestamp
    ):
        self.__gateway = gateway
        self.__repository = repository or MemoryTokenRepository()
        self.__clock = clock
        self.__initialized = False
        self.__refresh_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self.__initialized

    def initialize_token(self, token: TokenRecord) -> None:
        self.__repository.set(token)
        self.__initialized = True

    def get_full_token(self) -> TokenRecord:
        """Return the stored record as is. Never refreshes, even if the access token expired."""
        return self.__current()

    async def get_access_token(self) -> str:
        token = self.__current()

        # one snapshot for both checks
        now = self.__clock()

        if not token.access_expired(now):
            return token.access_token

        if token.refresh_expired(now):
            raise ExpiredRefreshTokenError()

        async with self.__refresh_lock:
            latest = self.__current()

            if latest is not token:
                logger.debug("Access token was refreshed while waiting; reusing it")

                return latest.access_token

            refreshed = await self.__refresh(token)

        return refreshed.access_token

    async def __refresh(self, token: TokenRecord) -> TokenRecord:
        logger.info("Access token expired at %s; refreshing", token.access_expiry)

        try:
            refreshed = await self.__gateway.exchange_refresh_token(token.refresh_token, token.refresh_expiry)
        except InvalidInputError as e:
            raise ExchangeFailedError(f"Authentication failed! Unable to refresh the access token: {e.message}") from e
        except AuthError:
            raise
        except Exception as e:
            raise ExchangeFailedError(f"Authentication failed! Unable to refresh the access token: {e}") from e

        self.initialize_token(refreshed)

        logger.info("Access token refreshed; valid until %s", refreshed.access_expiry)

        return refreshed

    def __current(self) -> TokenRecord:
        token = self.__repository.get()

        if not self.__initialized or token is None:
            raise NotInitializedError()

        return token
