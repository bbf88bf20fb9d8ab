from psn_auth.domain.models.token import TokenRecord
from psn_auth.domain.repository.token_repository import TokenRepository


class MemoryTokenRepository(TokenRepository):
    def __init__(self):
        self.__token: TokenRecord | None = None

        super().__init__()

    def get(self) -> TokenRecord | None:
        return self.__token

    def set(self, token: TokenRecord) -> None:
        self.__token = token
