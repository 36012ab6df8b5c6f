"""OAuth2 app registration and token exchange.

The flow is linear:

    reg = Registration("https://mastodon.social")
    reg.register(AppBuilder(client_name="my app", redirect_uris=OOB_REDIRECT))
    url = reg.authorize_url()        # open in a browser, copy the code
    client = reg.exchange(code)      # ready-to-use Mastodon client

The returned client takes over the registration's HTTP transport.
"""

import logging
from enum import Enum

import httpx

from .apps import AppBuilder, Scope
from .client import Mastodon
from .config import ClientConfig, build_http_client
from .credentials import Data
from .errors import ClientIdRequired, ClientSecretRequired
from .kernel import api_url, build_url, encode_form, normalize_base, send
from .parser import parse_oauth_token, parse_registered_app

logger = logging.getLogger(__name__)


class RegistrationState(Enum):
    FRESH = "fresh"
    APP_REGISTERED = "app_registered"
    AUTHORIZED = "authorized"


class Registration:
    """Obtain a credential bundle for one instance."""

    def __init__(
        self,
        base: str,
        http_client: httpx.Client | None = None,
        config: ClientConfig | None = None,
    ):
        self.base = normalize_base(base)
        self._config = config
        self._client = http_client or build_http_client(config)
        self._owns_client = True
        self.client_id: str | None = None
        self.client_secret: str | None = None
        self.redirect: str | None = None
        self.scopes: Scope = Scope.READ
        self._state = RegistrationState.FRESH

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: httpx.Client | None = None
    ) -> "Registration":
        return cls(config.base, http_client=http_client, config=config)

    @property
    def state(self) -> RegistrationState:
        return self._state

    def register(self, app: AppBuilder | None = None) -> None:
        """Register the app and keep the issued client credentials.

        Without an explicit ``app`` the descriptor from the configuration
        this registration was built with is used.
        """
        if app is None:
            if self._config is None:
                raise ValueError("register() needs an app when no config was given")
            app = self._config.app
        registered = send(
            self._client,
            "POST",
            api_url(self.base, "apps"),
            parse_registered_app,
            data=encode_form(app.to_form()),
        )
        self.client_id = registered.client_id
        self.client_secret = registered.client_secret
        self.redirect = registered.redirect_uri
        self.scopes = app.scopes
        self._state = RegistrationState.APP_REGISTERED
        logger.info("Registered app %r with %s", app.client_name, self.base)

    def authorize_url(self) -> str:
        """URL the user visits to grant access and obtain an authorization code."""
        if not self.client_id:
            raise ClientIdRequired()
        return build_url(
            self.base,
            "/oauth/authorize",
            [
                ("client_id", self.client_id),
                ("redirect_uri", self.redirect),
                ("scope", self.scopes.value),
                ("response_type", "code"),
            ],
        )

    def exchange(self, code: str) -> Mastodon:
        """Trade an authorization code for an access token.

        Returns a client that owns this registration's HTTP transport.
        """
        if not self.client_id:
            raise ClientIdRequired()
        if not self.client_secret:
            raise ClientSecretRequired()

        token = send(
            self._client,
            "POST",
            self.base + "/oauth/token",
            parse_oauth_token,
            data=encode_form(
                {
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect,
                }
            ),
        )

        data = Data(
            base=self.base,
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect=self.redirect or "",
            token=token.access_token,
        )
        self._state = RegistrationState.AUTHORIZED
        self._owns_client = False
        logger.info("Obtained access token for %s (scope: %s)", self.base, token.scope)
        return Mastodon(data, http_client=self._client)

    create_access_token = exchange

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
