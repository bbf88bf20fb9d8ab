from pathlib import Path
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict
)

ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = ROOT / ".env"


class Settings(BaseSettings):
    SERVICE_NAME: str = "psn-auth"

    PSN_BASE_URL            : str = "https://ca.account.sony.com/api"
    PSN_ACCESS_CODE_ENDPOINT: str = (
        "/authz/v3/oauth/authorize"
        "?access_type=offline"
        "&client_id=09515159-7237-4370-9b40-3806e67c0891"
        "&redirect_uri=com.scee.psxandroid.scecompcall%3A%2F%2Fredirect"
        "&response_type=code"
        "&scope=psn%3Amobile.v2.core%20psn%3Aclientapp"
    )
    PSN_TOKEN_ENDPOINT      : str = "/authz/v3/oauth/token"

    PSN_CLIENT_AUTHORIZATION: str = "Basic MDk1MTUxNTktNzIzNy00MzcwLTliNDAtMzgwNmU2N2MwODkxOnVjUGprYTV0bnRCMktxc1A="
    PSN_REDIRECT_URI        : str = "com.scee.psxandroid.scecompcall://redirect"
    PSN_SCOPE               : str = "psn:mobile.v2.core psn:clientapp"

    HTTP_TIMEOUT_SECONDS: float = 20.0

    INCLUDE_HUMAN_READABLE_EXPIRY: bool = True

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def access_code_url(self) -> str:
        return self.PSN_BASE_URL + self.PSN_ACCESS_CODE_ENDPOINT

    @property
    def token_url(self) -> str:
        return self.PSN_BASE_URL + self.PSN_TOKEN_ENDPOINT
