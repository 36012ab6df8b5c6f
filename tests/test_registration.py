"""Tests for app registration and the OAuth token exchange."""

from urllib.parse import parse_qsl

import httpx
import pytest
import respx

from mastoclient.apps import OOB_REDIRECT, AppBuilder, Scope
from mastoclient.config import ClientConfig
from mastoclient.errors import (
    ApiError,
    ClientIdRequired,
    ClientSecretRequired,
    UrlParseError,
)
from mastoclient.registration import Registration, RegistrationState

BASE = "https://example.social"

APP_RESPONSE = {
    "client_id": "ci",
    "client_secret": "cs",
    "redirect_uri": OOB_REDIRECT,
}

TOKEN_RESPONSE = {
    "access_token": "tok",
    "token_type": "Bearer",
    "scope": "read",
    "created_at": 0,
}


@pytest.fixture
def app() -> AppBuilder:
    return AppBuilder(client_name="t", redirect_uris=OOB_REDIRECT, scopes=Scope.READ)


def form_of(request: httpx.Request) -> dict[str, str]:
    return dict(parse_qsl(request.read().decode()))


class TestRegistration:
    @respx.mock
    def test_happy_path(self, app, account_json):
        apps_route = respx.post(f"{BASE}/api/v1/apps").mock(
            return_value=httpx.Response(200, json=APP_RESPONSE)
        )
        token_route = respx.post(f"{BASE}/oauth/token").mock(
            return_value=httpx.Response(200, json=TOKEN_RESPONSE)
        )
        verify_route = respx.get(f"{BASE}/api/v1/accounts/verify_credentials").mock(
            return_value=httpx.Response(200, json=account_json)
        )

        registration = Registration("https://example.social")
        assert registration.state is RegistrationState.FRESH

        registration.register(app)
        assert registration.state is RegistrationState.APP_REGISTERED
        assert form_of(apps_route.calls.last.request) == {
            "client_name": "t",
            "redirect_uris": OOB_REDIRECT,
            "scopes": "read",
        }
        assert "authorization" not in apps_route.calls.last.request.headers

        assert registration.authorize_url() == (
            "https://example.social/oauth/authorize?client_id=ci"
            "&redirect_uri=urn%3Aietf%3Awg%3Aoauth%3A2.0%3Aoob"
            "&scope=read&response_type=code"
        )

        with registration.exchange("abc") as client:
            assert registration.state is RegistrationState.AUTHORIZED
            assert form_of(token_route.calls.last.request) == {
                "client_id": "ci",
                "client_secret": "cs",
                "code": "abc",
                "grant_type": "authorization_code",
                "redirect_uri": OOB_REDIRECT,
            }
            assert client.data.token == "tok"
            assert client.data.base == BASE
            assert client.data.client_id == "ci"
            assert client.data.redirect == OOB_REDIRECT

            client.verify_credentials()

        assert verify_route.calls.last.request.headers["authorization"] == "Bearer tok"

    @respx.mock
    def test_website_is_sent_when_present(self):
        route = respx.post(f"{BASE}/api/v1/apps").mock(
            return_value=httpx.Response(200, json=APP_RESPONSE)
        )
        app = AppBuilder(
            client_name="t",
            redirect_uris=OOB_REDIRECT,
            scopes=Scope.READ_WRITE_FOLLOW,
            website="https://t.example",
        )
        with Registration(BASE) as registration:
            registration.register(app)
            assert "scope=read+write+follow" in registration.authorize_url()

        form = form_of(route.calls.last.request)
        assert form["website"] == "https://t.example"
        assert form["scopes"] == "read write follow"

    def test_exchange_before_register(self):
        with Registration(BASE) as registration:
            with pytest.raises(ClientIdRequired) as exc_info:
                registration.exchange("abc")
        assert exc_info.value.kind == "CLIENT_ID_REQUIRED"

    def test_authorize_url_before_register(self):
        with Registration(BASE) as registration:
            with pytest.raises(ClientIdRequired):
                registration.authorize_url()

    def test_exchange_without_secret(self):
        with Registration(BASE) as registration:
            registration.client_id = "ci"
            with pytest.raises(ClientSecretRequired):
                registration.exchange("abc")

    def test_invalid_base(self):
        with pytest.raises(UrlParseError):
            Registration("not a url")

    @respx.mock
    def test_register_error_envelope(self, app):
        respx.post(f"{BASE}/api/v1/apps").mock(
            return_value=httpx.Response(
                422,
                json={"error": "Validation failed: Redirect URI must be an absolute URI."},
            )
        )
        with Registration(BASE) as registration:
            with pytest.raises(ApiError, match="Validation failed"):
                registration.register(app)
            assert registration.state is RegistrationState.FRESH

    @respx.mock
    def test_exchange_invalid_grant(self, app):
        respx.post(f"{BASE}/api/v1/apps").mock(
            return_value=httpx.Response(200, json=APP_RESPONSE)
        )
        respx.post(f"{BASE}/oauth/token").mock(
            return_value=httpx.Response(
                400,
                json={
                    "error": "invalid_grant",
                    "error_description": "The provided authorization grant is invalid.",
                },
            )
        )
        with Registration(BASE) as registration:
            registration.register(app)
            with pytest.raises(ApiError) as exc_info:
                registration.exchange("bad")
            assert registration.state is RegistrationState.APP_REGISTERED

        assert exc_info.value.error == "invalid_grant"
        assert exc_info.value.status_code == 400

    def test_from_config(self):
        config = ClientConfig(base=f"{BASE}/", timeout=12.5)
        with Registration.from_config(config) as registration:
            assert registration.base == BASE

    @respx.mock
    def test_register_uses_configured_app(self):
        route = respx.post(f"{BASE}/api/v1/apps").mock(
            return_value=httpx.Response(200, json=APP_RESPONSE)
        )
        config = ClientConfig(
            base=BASE,
            app=AppBuilder(
                client_name="configured",
                redirect_uris=OOB_REDIRECT,
                scopes=Scope.READ_WRITE,
            ),
        )
        with Registration.from_config(config) as registration:
            registration.register()
            assert registration.state is RegistrationState.APP_REGISTERED
            assert registration.scopes is Scope.READ_WRITE

        form = form_of(route.calls.last.request)
        assert form["client_name"] == "configured"
        assert form["scopes"] == "read write"

    def test_register_without_app_or_config(self):
        with Registration(BASE) as registration:
            with pytest.raises(ValueError, match="needs an app"):
                registration.register()

    def test_create_access_token_alias(self):
        assert Registration.create_access_token is Registration.exchange
