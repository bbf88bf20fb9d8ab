from abc import (
    ABC,
    abstractmethod
)

from psn_auth.domain.models.token import TokenRecord


class TokenGateway(ABC):
    """Network side of the authentication flow.

    Implementations raise `psn_auth.domain.errors.AuthError` subclasses on failure.
    """

    @abstractmethod
    async def exchange_initial_credential(self, npsso: str) -> TokenRecord:
        """Trade the `npsso` session cookie for a first token record."""

    @abstractmethod
    async def exchange_refresh_token(self, refresh_token: str, refresh_expiry: int) -> TokenRecord:
        """Trade a refresh token for a renewed token record."""
