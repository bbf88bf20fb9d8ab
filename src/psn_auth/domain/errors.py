from enum import Enum
from typing import Any

NPSSO_HELP_URL = "https://ca.account.sony.com/api/v1/ssocookie"


class AuthErrorKind(str, Enum):
    NOT_INITIALIZED       = "not_initialized"
    EXPIRED_REFRESH_TOKEN = "expired_refresh_token"
    EXCHANGE_FAILED       = "exchange_failed"
    INVALID_CREDENTIAL    = "invalid_credential"
    MALFORMED_RESPONSE    = "malformed_response"
    INVALID_INPUT         = "invalid_input"


class AuthError(Exception):
    """Base for every failure raised by the token manager and the gateway."""

    kind: AuthErrorKind
    default_message: str = "Authentication error."

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        self.status_code = status_code

        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}

        if self.status_code is not None:
            data["status_code"] = self.status_code

        return data


class NotInitializedError(AuthError):
    kind = AuthErrorKind.NOT_INITIALIZED
    default_message = (
        "The token manager was not initialized. Authenticate first with a NPSSO "
        "without disabling the manager, or call initialize_token() with a token record."
    )


class ExpiredRefreshTokenError(AuthError):
    kind = AuthErrorKind.EXPIRED_REFRESH_TOKEN
    default_message = "The refresh token is too old to be refreshed. Please login again using a new NPSSO."


class ExchangeFailedError(AuthError):
    kind = AuthErrorKind.EXCHANGE_FAILED
    default_message = "Authentication failed! The token exchange did not succeed."


class InvalidCredentialError(AuthError):
    kind = AuthErrorKind.INVALID_CREDENTIAL
    default_message = (
        "Unable to retrieve the Access Code. Please visit "
        f"{NPSSO_HELP_URL} and double check if you have provided the correct NPSSO."
    )


class MalformedResponseError(AuthError):
    kind = AuthErrorKind.MALFORMED_RESPONSE
    default_message = (
        "Malformed Access Code received, this usually happens because a bad NPSSO was provided. "
        f"Please visit {NPSSO_HELP_URL} and double check if you have provided the correct NPSSO."
    )


class InvalidInputError(AuthError):
    kind = AuthErrorKind.INVALID_INPUT
    default_message = "Invalid input for the token exchange."
