from abc import (
    ABC,
    abstractmethod
)

from psn_auth.domain.models.token import TokenRecord


class TokenRepository(ABC):
    """Holds at most one token record. `set` must replace the whole record in one step."""

    @abstractmethod
    def get(self) -> TokenRecord | None:
        ...

    @abstractmethod
    def set(self, token: TokenRecord) -> None:
        ...
