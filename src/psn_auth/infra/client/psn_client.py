import httpx
import logging
import re

from pydantic import ValidationError
from typing import Callable

from psn_auth.config.settings import Settings
from psn_auth.domain.errors import (
    ExchangeFailedError,
    ExpiredRefreshTokenError,
    InvalidCredentialError,
    InvalidInputError,
    MalformedResponseError
)
from psn_auth.domain.gateway.token_gateway import TokenGateway
from psn_auth.domain.models.token import (
    AuthenticatedResponse,
    TokenRecord
)
from psn_auth.utils.clock import now_timestamp

logger = logging.getLogger(__name__)

# PSN access codes look like "v3.XXXXXX"; anything longer means the Location header was not trimmed
ACCESS_CODE_MAX_LENGTH = 10


class PsnTokenGateway(TokenGateway):
    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], int] = now_timestamp,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.__settings = settings
        self.__clock = clock
        self.__transport = transport

    def __client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.__settings.HTTP_TIMEOUT_SECONDS, transport=self.__transport)

    def get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": self.__settings.PSN_CLIENT_AUTHORIZATION,
        }

    async def get_access_code(self, npsso: str) -> str:
        if not isinstance(npsso, str) or not npsso:
            raise InvalidInputError(
                "No NPSSO was provided, therefore it's impossible to authenticate with PSN. "
                "Please provide a NPSSO and try again."
            )

        # sent as a cookie header, which only carries ASCII
        if not npsso.isascii():
            raise InvalidInputError("The NPSSO contains non ASCII characters. Please double check the value provided.")

        try:
            async with self.__client() as c:
                r = await c.get(
                    self.__settings.access_code_url,
                    headers={"Cookie": f"npsso={npsso}"},
                    follow_redirects=False
                )
        except httpx.HTTPError as e:
            raise ExchangeFailedError(f"Unable to reach the access code endpoint: {e}") from e

        location = r.headers.get("location")

        if location is None:
            logger.debug("Access code request answered %s without a Location header", r.status_code)

            raise InvalidCredentialError()

        access_code = re.sub(r"&cid=.*", "", re.sub(r".*code=", "", location))

        if len(access_code) > ACCESS_CODE_MAX_LENGTH:
            raise MalformedResponseError()

        return access_code

    async def exchange_access_code(self, access_code: str) -> TokenRecord:
        data = {
            "code": access_code,
            "redirect_uri": self.__settings.PSN_REDIRECT_URI,
            "grant_type": "authorization_code",
            "token_format": "jwt",
        }

        r = await self.__post_token(data, "Failed to use Access Code to retrieve Authentication Token.")

        try:
            return self.__build_record(r)
        except (ValueError, OverflowError, ValidationError) as e:
            raise MalformedResponseError("Token endpoint answered with an unexpected payload.") from e

    async def exchange_initial_credential(self, npsso: str) -> TokenRecord:
        access_code = await self.get_access_code(npsso)

        token = await self.exchange_access_code(access_code)

        logger.info("Authenticated with NPSSO; access token valid until %s", token.access_expiry)

        return token

    async def exchange_refresh_token(self, refresh_token: str, refresh_expiry: int) -> TokenRecord:
        if not isinstance(refresh_token, str) or not refresh_token:
            raise InvalidInputError('No valid "refresh_token" passed, impossible to refresh access token without one.')

        if isinstance(refresh_expiry, bool) or not isinstance(refresh_expiry, int):
            raise InvalidInputError(
                "Token doesn't provide a numerical 'refresh_expiry', required to check "
                "if the refresh token is within refresh date range."
            )

        if self.__clock() > refresh_expiry:
            raise ExpiredRefreshTokenError()

        data = {
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
            "token_format": "jwt",
            "scope": self.__settings.PSN_SCOPE,
        }

        r = await self.__post_token(data, "Failed to use Refresh Token to retrieve an updated Authentication Token.")

        try:
            return self.__build_record(r)
        except (ValueError, OverflowError, ValidationError) as e:
            raise ExchangeFailedError(
                "Token endpoint answered the refresh with an unexpected payload.",
                status_code=r.status_code
            ) from e

    async def __post_token(self, data: dict[str, str], failure: str) -> httpx.Response:
        try:
            async with self.__client() as c:
                r = await c.post(self.__settings.token_url, data=data, headers=self.get_headers())
        except httpx.HTTPError as e:
            raise ExchangeFailedError(f"Authentication failed! {failure} {e}") from e

        if r.status_code != 200:
            logger.debug("Token endpoint answered %s for grant %s", r.status_code, data["grant_type"])

            raise ExchangeFailedError(
                f"Authentication failed! {failure} Status code: {r.status_code}, Error message: {r.reason_phrase}",
                status_code=r.status_code
            )

        return r

    def __build_record(self, r: httpx.Response) -> TokenRecord:
        payload = AuthenticatedResponse.model_validate(r.json())

        return payload.to_record(self.__clock(), self.__settings.INCLUDE_HUMAN_READABLE_EXPIRY)
