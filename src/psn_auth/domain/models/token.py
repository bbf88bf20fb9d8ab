from pydantic import (
    BaseModel,
    ConfigDict
)

from psn_auth.utils.clock import to_iso

ACCESS_TOKEN_LIFETIME  = 60 * 60
REFRESH_TOKEN_LIFETIME = 60 * 24 * 60 * 60


class TokenRecord(BaseModel):
    """
    Access/refresh token pair with absolute expiries in epoch milliseconds.

    The human readable fields are ISO renderings of the two expiries, kept for
    display only.
    """
    model_config = ConfigDict(frozen=True)

    access_token  : str
    access_expiry : int
    refresh_token : str
    refresh_expiry: int

    human_readable_access_expiry : str | None = None
    human_readable_refresh_expiry: str | None = None

    def access_expired(self, now: int) -> bool:
        return self.access_expiry < now

    def refresh_expired(self, now: int) -> bool:
        return self.refresh_expiry < now


class AuthenticatedResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token            : str
    expires_in              : int = ACCESS_TOKEN_LIFETIME
    refresh_token           : str
    refresh_token_expires_in: int = REFRESH_TOKEN_LIFETIME

    token_type: str | None = None
    scope     : str | None = None
    id_token  : str | None = None

    def to_record(self, now: int, include_human_readable: bool = True) -> TokenRecord:
        access_expiry = now + self.expires_in * 1000
        refresh_expiry = now + self.refresh_token_expires_in * 1000

        return TokenRecord(
            access_token=self.access_token,
            access_expiry=access_expiry,
            refresh_token=self.refresh_token,
            refresh_expiry=refresh_expiry,
            human_readable_access_expiry=to_iso(access_expiry) if include_human_readable else None,
            human_readable_refresh_expiry=to_iso(refresh_expiry) if include_human_readable else None,
        )
