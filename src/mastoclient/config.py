"""Configuration loading and saving.

Config file location: ~/.config/mastoclient/config.toml

Schema:
    [instance]
    base = "https://mastodon.social"

    [app]
    client_name = "mastoclient"
    redirect_uris = "urn:ietf:wg:oauth:2.0:oob"
    scopes = "read write"
    website = "https://example.org"  # optional

    [http]
    timeout = 30.0                   # optional, httpx default when absent
    user_agent = "mastoclient"       # optional

Environment overrides:
    MASTOCLIENT_BASE
    MASTOCLIENT_USER_AGENT

Credentials are not stored here; persist Data.to_json() yourself.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import tomli_w

from .apps import OOB_REDIRECT, AppBuilder, Scope

CONFIG_DIR = Path.home() / ".config" / "mastoclient"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_USER_AGENT = "mastoclient"


@dataclass
class ClientConfig:
    base: str
    app: AppBuilder = field(
        default_factory=lambda: AppBuilder(
            client_name="mastoclient", redirect_uris=OOB_REDIRECT
        )
    )
    timeout: float | None = None
    user_agent: str = DEFAULT_USER_AGENT


def load_config(config_path: Path = CONFIG_FILE) -> ClientConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    instance_data = data.get("instance", {})
    app_data = data.get("app", {})
    http_data = data.get("http", {})

    base = os.environ.get("MASTOCLIENT_BASE") or instance_data.get("base", "")
    if not base:
        raise ValueError("Config missing required instance.base")

    app = AppBuilder(
        client_name=app_data.get("client_name", "mastoclient"),
        redirect_uris=app_data.get("redirect_uris", OOB_REDIRECT),
        scopes=Scope.parse(app_data.get("scopes", "read")),
        website=app_data.get("website"),
    )

    timeout = http_data.get("timeout")
    user_agent = (
        os.environ.get("MASTOCLIENT_USER_AGENT")
        or http_data.get("user_agent")
        or DEFAULT_USER_AGENT
    )

    return ClientConfig(
        base=base,
        app=app,
        timeout=float(timeout) if timeout is not None else None,
        user_agent=user_agent,
    )


def save_config(config: ClientConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    app_data = {
        "client_name": config.app.client_name,
        "redirect_uris": config.app.redirect_uris,
        "scopes": config.app.scopes.value,
    }
    if config.app.website:
        app_data["website"] = config.app.website

    http_data: dict = {"user_agent": config.user_agent}
    if config.timeout is not None:
        http_data["timeout"] = config.timeout

    data = {
        "instance": {"base": config.base},
        "app": app_data,
        "http": http_data,
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(config_path, 0o600)


def build_http_client(config: ClientConfig | None = None) -> httpx.Client:
    """Create the transport shared by all calls of one client.

    Without an explicit timeout the httpx default applies.
    """
    if config is None:
        return httpx.Client(headers={"User-Agent": DEFAULT_USER_AGENT})
    kwargs = {}
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    return httpx.Client(headers={"User-Agent": config.user_agent}, **kwargs)
