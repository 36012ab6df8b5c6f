"""Shared test fixtures."""

import json
from pathlib import Path

import httpx
import pytest

from mastoclient.client import Mastodon
from mastoclient.credentials import Data

FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASE = "https://example.social"


@pytest.fixture
def account_json() -> dict:
    """A sample account as returned by the service."""
    with open(FIXTURES_DIR / "account.json") as f:
        return json.load(f)


@pytest.fixture
def status_json() -> dict:
    """A sample status with an attachment, a mention and a tag."""
    with open(FIXTURES_DIR / "status.json") as f:
        return json.load(f)


@pytest.fixture
def notification_json(account_json, status_json) -> dict:
    return {
        "id": "34975861",
        "type": "mention",
        "created_at": "2019-11-23T07:49:02.064Z",
        "account": account_json,
        "status": status_json,
    }


@pytest.fixture
def relationship_json() -> dict:
    return {
        "id": "3",
        "following": True,
        "showing_reblogs": True,
        "followed_by": False,
        "blocking": False,
        "muting": False,
        "requested": False,
        "domain_blocking": False,
    }


@pytest.fixture
def data() -> Data:
    """A credential bundle with an access token."""
    return Data(
        base=BASE,
        client_id="ci",
        client_secret="cs",
        redirect="urn:ietf:wg:oauth:2.0:oob",
        token="tok",
    )


@pytest.fixture
def client(data):
    with Mastodon.from_data(data, http_client=httpx.Client()) as client:
        yield client
