"""Tests for the PSN token gateway against a mocked HTTP transport."""
from urllib.parse import parse_qs

import httpx
import pytest

from fakes import NOW, FrozenClock
from psn_auth.config.settings import Settings
from psn_auth.domain.errors import (
    ExchangeFailedError,
    ExpiredRefreshTokenError,
    InvalidCredentialError,
    InvalidInputError,
    MalformedResponseError
)
from psn_auth.infra.client.psn_client import PsnTokenGateway

REDIRECT_LOCATION = "com.scee.psxandroid.scecompcall://redirect/?code=v3.ABCDEF&cid=0a1b2c3d-4e5f"

TOKEN_PAYLOAD = {
    "access_token": "new-access",
    "expires_in": 3600,
    "refresh_token": "new-refresh",
    "refresh_token_expires_in": 5184000,
    "token_type": "bearer",
    "scope": "psn:mobile.v2.core psn:clientapp",
    "id_token": "header.claims.signature",
}


class Recorder:
    """Handler for httpx.MockTransport that records requests and answers from a queue."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def build_gateway(recorder, clock=None, **settings):
    return PsnTokenGateway(
        Settings(**settings),
        clock=clock or FrozenClock(),
        transport=httpx.MockTransport(recorder)
    )


def form(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


@pytest.mark.asyncio
async def test_access_code_is_extracted_from_location_header():
    recorder = Recorder(httpx.Response(302, headers={"Location": REDIRECT_LOCATION}))
    gateway = build_gateway(recorder)

    assert await gateway.get_access_code("good-npsso") == "v3.ABCDEF"

    request = recorder.requests[0]
    assert request.method == "GET"
    assert request.headers["cookie"] == "npsso=good-npsso"
    assert request.url.path == "/api/authz/v3/oauth/authorize"


@pytest.mark.asyncio
async def test_missing_location_header_means_invalid_npsso():
    gateway = build_gateway(Recorder(httpx.Response(200)))

    with pytest.raises(InvalidCredentialError) as exc_info:
        await gateway.get_access_code("bad-npsso")

    assert "double check" in exc_info.value.message


@pytest.mark.asyncio
async def test_untrimmable_location_is_malformed():
    recorder = Recorder(httpx.Response(302, headers={"Location": "com.scee.psxandroid.scecompcall://redirect/?error=login_required"}))
    gateway = build_gateway(recorder)

    with pytest.raises(MalformedResponseError):
        await gateway.get_access_code("awfulbadstringnotnpsso")


@pytest.mark.asyncio
async def test_empty_npsso_is_rejected_before_any_request():
    recorder = Recorder()
    gateway = build_gateway(recorder)

    with pytest.raises(InvalidInputError):
        await gateway.exchange_initial_credential("")

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_non_ascii_npsso_is_rejected_before_any_request():
    recorder = Recorder()
    gateway = build_gateway(recorder)

    with pytest.raises(InvalidInputError):
        await gateway.exchange_initial_credential("npsso-é")

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_initial_exchange_builds_token_record():
    recorder = Recorder(
        httpx.Response(302, headers={"Location": REDIRECT_LOCATION}),
        httpx.Response(200, json=TOKEN_PAYLOAD),
    )
    settings = Settings()
    gateway = build_gateway(recorder)

    token = await gateway.exchange_initial_credential("good-npsso")

    assert token.access_token == "new-access"
    assert token.access_expiry == NOW + 3_600_000
    assert token.refresh_token == "new-refresh"
    assert token.refresh_expiry == NOW + 5_184_000_000
    assert token.human_readable_access_expiry == "2023-11-14T23:13:20.000Z"
    assert token.human_readable_refresh_expiry == "2024-01-13T22:13:20.000Z"

    post = recorder.requests[1]
    assert post.method == "POST"
    assert post.url.path == "/api/authz/v3/oauth/token"
    assert post.headers["authorization"] == settings.PSN_CLIENT_AUTHORIZATION
    assert form(post) == {
        "code": "v3.ABCDEF",
        "redirect_uri": "com.scee.psxandroid.scecompcall://redirect",
        "grant_type": "authorization_code",
        "token_format": "jwt",
    }


@pytest.mark.asyncio
async def test_rejected_access_code_reports_status():
    gateway = build_gateway(Recorder(httpx.Response(400)))

    with pytest.raises(ExchangeFailedError) as exc_info:
        await gateway.exchange_access_code("verybadaccesscode")

    assert exc_info.value.status_code == 400
    assert "Status code: 400, Error message: Bad Request" in exc_info.value.message


@pytest.mark.asyncio
async def test_unparseable_initial_token_payload_is_malformed():
    gateway = build_gateway(Recorder(httpx.Response(200, text="<html>not json</html>")))

    with pytest.raises(MalformedResponseError):
        await gateway.exchange_access_code("v3.ABCDEF")


@pytest.mark.asyncio
async def test_out_of_range_lifetime_in_initial_payload_is_malformed():
    payload = {**TOKEN_PAYLOAD, "refresh_token_expires_in": 10**12}
    gateway = build_gateway(Recorder(httpx.Response(200, json=payload)))

    with pytest.raises(MalformedResponseError):
        await gateway.exchange_access_code("v3.A")


@pytest.mark.asyncio
async def test_out_of_range_lifetime_in_refresh_payload_fails_exchange():
    payload = {**TOKEN_PAYLOAD, "expires_in": 10**12}
    gateway = build_gateway(Recorder(httpx.Response(200, json=payload)))

    with pytest.raises(ExchangeFailedError) as exc_info:
        await gateway.exchange_refresh_token("R1", NOW + 1000)

    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "refresh_token, refresh_expiry",
    [
        ("", NOW + 1000),
        (None, NOW + 1000),
        ("R1", "tomorrow"),
        ("R1", True),
        ("R1", None),
    ],
)
async def test_refresh_rejects_invalid_input(refresh_token, refresh_expiry):
    recorder = Recorder()
    gateway = build_gateway(recorder)

    with pytest.raises(InvalidInputError):
        await gateway.exchange_refresh_token(refresh_token, refresh_expiry)

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_refresh_rejects_expired_refresh_token():
    recorder = Recorder()
    gateway = build_gateway(recorder)

    with pytest.raises(ExpiredRefreshTokenError):
        await gateway.exchange_refresh_token("R1", NOW - 1)

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_refresh_posts_refresh_grant():
    recorder = Recorder(httpx.Response(200, json=TOKEN_PAYLOAD))
    clock = FrozenClock()
    gateway = build_gateway(recorder, clock=clock)

    token = await gateway.exchange_refresh_token("R1", NOW + 1000)

    assert token.access_token == "new-access"
    assert token.access_expiry == NOW + 3_600_000
    assert form(recorder.requests[0]) == {
        "refresh_token": "R1",
        "grant_type": "refresh_token",
        "token_format": "jwt",
        "scope": "psn:mobile.v2.core psn:clientapp",
    }


@pytest.mark.asyncio
async def test_refresh_failure_carries_provider_status():
    gateway = build_gateway(Recorder(httpx.Response(500)))

    with pytest.raises(ExchangeFailedError) as exc_info:
        await gateway.exchange_refresh_token("R1", NOW + 1000)

    assert exc_info.value.status_code == 500
    assert "Internal Server Error" in exc_info.value.message


@pytest.mark.asyncio
async def test_refresh_with_incomplete_payload_fails():
    gateway = build_gateway(Recorder(httpx.Response(200, json={"expires_in": 3600})))

    with pytest.raises(ExchangeFailedError):
        await gateway.exchange_refresh_token("R1", NOW + 1000)


@pytest.mark.asyncio
async def test_network_error_becomes_exchange_failed():
    gateway = build_gateway(Recorder(httpx.ConnectError("connection refused")))

    with pytest.raises(ExchangeFailedError) as exc_info:
        await gateway.exchange_refresh_token("R1", NOW + 1000)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_human_readable_expiry_can_be_disabled():
    gateway = build_gateway(
        Recorder(httpx.Response(200, json=TOKEN_PAYLOAD)),
        INCLUDE_HUMAN_READABLE_EXPIRY=False
    )

    token = await gateway.exchange_refresh_token("R1", NOW + 1000)

    assert token.human_readable_access_expiry is None
    assert token.human_readable_refresh_expiry is None
    assert token.refresh_expiry == NOW + 5_184_000_000
