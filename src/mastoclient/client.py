"""Client for the Mastodon REST API (``/api/v1``).

Every public method is a thin binding of an HTTP method, an endpoint path and
an expected entity. All of them go through kernel.send(), which attaches the
bearer token and decodes the response.

Build a client from persisted credentials:

    data = Data.from_json(path.read_text())
    with Mastodon.from_data(data) as client:
        client.home_timeline()

or get one from Registration.exchange().
"""

from dataclasses import replace
from typing import Any
from urllib.parse import quote

import httpx

from .config import ClientConfig, build_http_client
from .credentials import Data
from .kernel import Params, api_url, encode_form, normalize_base, send
from .models import (
    Account,
    Attachment,
    Card,
    Context,
    Empty,
    Instance,
    Notification,
    Relationship,
    Report,
    SearchResult,
    Status,
)
from .parser import (
    Decoder,
    T,
    parse_account,
    parse_attachment,
    parse_card,
    parse_context,
    parse_empty,
    parse_instance,
    parse_list,
    parse_notification,
    parse_relationship,
    parse_report,
    parse_search_result,
    parse_status,
)
from .status_builder import StatusBuilder

Id = int | str

parse_accounts = parse_list(parse_account)
parse_statuses = parse_list(parse_status)


def _segment(value: Id) -> str:
    return quote(str(value), safe="")


class Mastodon:
    """Authenticated client bound to one credential bundle."""

    def __init__(
        self,
        data: Data,
        http_client: httpx.Client | None = None,
        config: ClientConfig | None = None,
    ):
        base = normalize_base(data.base)
        if base != data.base:
            data = replace(data, base=base)
        self._data = data
        self._client = http_client or build_http_client(config)

    @classmethod
    def from_data(
        cls,
        data: Data,
        http_client: httpx.Client | None = None,
        config: ClientConfig | None = None,
    ) -> "Mastodon":
        return cls(data, http_client=http_client, config=config)

    @property
    def data(self) -> Data:
        return self._data

    @property
    def base(self) -> str:
        return self._data.base

    @property
    def client_id(self) -> str:
        return self._data.client_id

    @property
    def client_secret(self) -> str:
        return self._data.client_secret

    @property
    def redirect(self) -> str:
        return self._data.redirect

    @property
    def token(self) -> str:
        return self._data.token

    def _request(
        self,
        method: str,
        endpoint: str,
        decoder: Decoder[T],
        params: Params | None = None,
        **body: Any,
    ) -> T:
        url = api_url(self._data.base, endpoint, params)
        return send(self._client, method, url, decoder, token=self._data.token, **body)

    def _get(
        self, endpoint: str, decoder: Decoder[T], params: Params | None = None
    ) -> T:
        return self._request("GET", endpoint, decoder, params)

    def _post(
        self, endpoint: str, decoder: Decoder[T], form: Params | None = None
    ) -> T:
        data = encode_form(form) if form is not None else None
        return self._request("POST", endpoint, decoder, data=data)

    def _delete(self, endpoint: str, decoder: Decoder[T]) -> T:
        return self._request("DELETE", endpoint, decoder)

    # ── Accounts ──

    def verify_credentials(self) -> Account:
        return self._get("accounts/verify_credentials", parse_account)

    def account(self, id: Id) -> Account:
        return self._get(f"accounts/{_segment(id)}", parse_account)

    def followers(self, id: Id) -> list[Account]:
        return self._get(f"accounts/{_segment(id)}/followers", parse_accounts)

    def following(self, id: Id) -> list[Account]:
        return self._get(f"accounts/{_segment(id)}/following", parse_accounts)

    def account_statuses(
        self,
        id: Id,
        only_media: bool = False,
        exclude_replies: bool = False,
        since_id: Id | None = None,
    ) -> list[Status]:
        """Statuses posted by an account.

        Flags that are False and a missing ``since_id`` are not sent.
        """
        params = [
            ("only_media", only_media),
            ("exclude_replies", exclude_replies),
            ("since_id", since_id),
        ]
        return self._get(f"accounts/{_segment(id)}/statuses", parse_statuses, params)

    def relationships(self, ids: list[Id]) -> list[Relationship]:
        return self._get(
            "accounts/relationships",
            parse_list(parse_relationship),
            [("id", list(ids))],
        )

    def search_accounts(self, q: str, limit: int | None = None) -> list[Account]:
        params = [("q", q), ("limit", limit)]
        return self._get("accounts/search", parse_accounts, params)

    def _account_action(self, id: Id, action: str) -> Account:
        return self._get(f"accounts/{_segment(id)}/{action}", parse_account)

    def follow(self, id: Id) -> Account:
        return self._account_action(id, "follow")

    def unfollow(self, id: Id) -> Account:
        return self._account_action(id, "unfollow")

    def block(self, id: Id) -> Account:
        return self._account_action(id, "block")

    def unblock(self, id: Id) -> Account:
        return self._account_action(id, "unblock")

    def mute(self, id: Id) -> Account:
        return self._account_action(id, "mute")

    def unmute(self, id: Id) -> Account:
        return self._account_action(id, "unmute")

    def blocks(self) -> list[Account]:
        return self._get("blocks", parse_accounts)

    def mutes(self) -> list[Account]:
        return self._get("mutes", parse_accounts)

    def follow_requests(self) -> list[Account]:
        return self._get("follow_requests", parse_accounts)

    def allow_follow_request(self, id: Id) -> Empty:
        return self._post("accounts/follow_requests/authorize", parse_empty, {"id": id})

    def reject_follow_request(self, id: Id) -> Empty:
        return self._post("accounts/follow_requests/reject", parse_empty, {"id": id})

    def follows(self, uri: str) -> Account:
        """Follow a remote account by ``username@domain``."""
        return self._post("follows", parse_account, {"uri": uri})

    # ── Notifications ──

    def notifications(self) -> list[Notification]:
        return self._get("notifications", parse_list(parse_notification))

    def get_notification(self, id: Id) -> Notification:
        return self._get(f"notifications/{_segment(id)}", parse_notification)

    def clear_notifications(self) -> Empty:
        return self._post("notifications/clear", parse_empty)

    # ── Reports ──

    def reports(self) -> list[Report]:
        return self._get("reports", parse_list(parse_report))

    def report(self, account_id: Id, status_ids: list[Id], comment: str) -> Report:
        form = {
            "account_id": account_id,
            "status_ids": list(status_ids),
            "comment": comment,
        }
        return self._post("reports", parse_report, form)

    # ── Timelines ──

    def home_timeline(self) -> list[Status]:
        return self._get("timelines/home", parse_statuses)

    def public_timeline(self, local: bool = False) -> list[Status]:
        return self._get("timelines/public", parse_statuses, [("local", local)])

    def tag_timeline(self, hashtag: str, local: bool = False) -> list[Status]:
        return self._get(
            f"timelines/tag/{_segment(hashtag)}", parse_statuses, [("local", local)]
        )

    # ── Statuses ──

    def status(self, id: Id) -> Status:
        return self._get(f"statuses/{_segment(id)}", parse_status)

    def context(self, id: Id) -> Context:
        return self._get(f"statuses/{_segment(id)}/context", parse_context)

    def card(self, id: Id) -> Card:
        return self._get(f"statuses/{_segment(id)}/card", parse_card)

    def reblogged_by(self, id: Id) -> list[Account]:
        return self._get(f"statuses/{_segment(id)}/reblogged_by", parse_accounts)

    def favourited_by(self, id: Id) -> list[Account]:
        return self._get(f"statuses/{_segment(id)}/favourited_by", parse_accounts)

    def _status_action(self, id: Id, action: str) -> Status:
        return self._post(f"statuses/{_segment(id)}/{action}", parse_status)

    def reblog(self, id: Id) -> Status:
        return self._status_action(id, "reblog")

    def unreblog(self, id: Id) -> Status:
        return self._status_action(id, "unreblog")

    def favourite(self, id: Id) -> Status:
        return self._status_action(id, "favourite")

    def unfavourite(self, id: Id) -> Status:
        return self._status_action(id, "unfavourite")

    def delete_status(self, id: Id) -> Empty:
        return self._delete(f"statuses/{_segment(id)}", parse_empty)

    def new_status(self, status: StatusBuilder) -> Status:
        """Post a status. The payload is sent as JSON."""
        return self._request("POST", "statuses", parse_status, json=status.to_json())

    # ── Media, search, instance ──

    def media(
        self, file: bytes, filename: str = "file", description: str | None = None
    ) -> Attachment:
        """Upload a media file as multipart form data."""
        data = {"description": description} if description else None
        return self._request(
            "POST",
            "media",
            parse_attachment,
            files={"file": (filename, file)},
            data=data,
        )

    def search(self, q: str, resolve: bool) -> SearchResult:
        return self._post("search", parse_search_result, {"q": q, "resolve": resolve})

    def instance(self) -> Instance:
        return self._get("instance", parse_instance)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"Mastodon(base={self._data.base!r})"
