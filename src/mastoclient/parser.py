"""Decode JSON response bodies into entity objects.

Each ``parse_*`` function takes the already-loaded JSON value and either
returns an entity or raises KeyError, TypeError or ValueError. Unknown keys
are ignored; optional keys that are missing or null decode as None.

decode_response() applies the service's response contract: a body is first
decoded as the expected entity, and only if that fails as an error envelope
(``{"error": ..., "error_description": ...}``). Bodies that fit neither raise
DecodeError chained to the first failure.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from .errors import ApiError, DecodeError
from .models import (
    Account,
    Application,
    Attachment,
    AttachmentType,
    Card,
    Context,
    Empty,
    Instance,
    Mention,
    Notification,
    NotificationType,
    OAuthToken,
    RegisteredApp,
    Relationship,
    Report,
    SearchResult,
    Source,
    Status,
    Tag,
    Visibility,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[Any], T]

# Maximum number of body characters kept on a DecodeError
BODY_EXCERPT = 200


def _object(value: Any) -> dict:
    if not isinstance(value, dict):
        raise TypeError(f"expected a JSON object, got {type(value).__name__}")
    return value


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return value


def _bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return value


def _id(value: Any) -> str:
    """Ids may arrive as JSON numbers or strings; normalize to str."""
    if isinstance(value, str):
        return value
    return str(_int(value))


def _datetime(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp that carries a timezone."""
    parsed = datetime.fromisoformat(_str(value))
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without timezone: {value!r}")
    return parsed


def _epoch(value: Any) -> datetime:
    """Epoch seconds as an aware UTC datetime."""
    try:
        return datetime.fromtimestamp(_int(value), tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"timestamp out of range: {value!r}") from e


def _optional(data: dict, key: str, decoder: Decoder) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return decoder(value)


def _list(data: dict, key: str, decoder: Decoder) -> list:
    value = data.get(key)
    if value is None:
        return []
    return parse_list(decoder)(value)


def parse_list(decoder: Decoder[T]) -> Decoder[list[T]]:
    """Lift an entity decoder to a decoder for a JSON array of entities."""

    def parse(value: Any) -> list[T]:
        if not isinstance(value, list):
            raise TypeError(f"expected a JSON array, got {type(value).__name__}")
        return [decoder(item) for item in value]

    return parse


def parse_source(value: Any) -> Source:
    data = _object(value)
    return Source(
        privacy=_optional(data, "privacy", Visibility),
        sensitive=_optional(data, "sensitive", _bool),
        note=_optional(data, "note", _str),
    )


def parse_account(value: Any) -> Account:
    data = _object(value)
    return Account(
        id=_id(data["id"]),
        username=_str(data["username"]),
        acct=_str(data["acct"]),
        display_name=_str(data["display_name"]),
        note=_str(data["note"]),
        url=_str(data["url"]),
        avatar=_str(data["avatar"]),
        header=_str(data["header"]),
        locked=_bool(data["locked"]),
        created_at=_datetime(data["created_at"]),
        followers_count=_int(data["followers_count"]),
        following_count=_int(data["following_count"]),
        statuses_count=_int(data["statuses_count"]),
        avatar_static=_optional(data, "avatar_static", _str),
        header_static=_optional(data, "header_static", _str),
        source=_optional(data, "source", parse_source),
    )


def parse_mention(value: Any) -> Mention:
    data = _object(value)
    return Mention(
        id=_id(data["id"]),
        username=_str(data["username"]),
        acct=_str(data["acct"]),
        url=_str(data["url"]),
    )


def parse_tag(value: Any) -> Tag:
    data = _object(value)
    return Tag(name=_str(data["name"]), url=_str(data["url"]))


def parse_application(value: Any) -> Application:
    data = _object(value)
    return Application(
        name=_str(data["name"]),
        website=_optional(data, "website", _str),
    )


def _attachment_type(value: Any) -> AttachmentType:
    try:
        return AttachmentType(_str(value))
    except ValueError:
        logger.debug("Unknown attachment type %r", value)
        return AttachmentType.UNKNOWN


def parse_attachment(value: Any) -> Attachment:
    data = _object(value)
    return Attachment(
        id=_id(data["id"]),
        attachment_type=_attachment_type(data["type"]),
        url=_str(data["url"]),
        preview_url=_str(data["preview_url"]),
        remote_url=_optional(data, "remote_url", _str),
        text_url=_optional(data, "text_url", _str),
    )


def parse_status(value: Any) -> Status:
    data = _object(value)
    return Status(
        id=_id(data["id"]),
        uri=_str(data["uri"]),
        account=parse_account(data["account"]),
        content=_str(data["content"]),
        created_at=_datetime(data["created_at"]),
        reblogs_count=_int(data["reblogs_count"]),
        favourites_count=_int(data["favourites_count"]),
        visibility=Visibility(_str(data["visibility"])),
        url=_optional(data, "url", _str),
        in_reply_to_id=_optional(data, "in_reply_to_id", _id),
        in_reply_to_account_id=_optional(data, "in_reply_to_account_id", _id),
        reblog=_optional(data, "reblog", parse_status),
        reblogged=_optional(data, "reblogged", _bool),
        favourited=_optional(data, "favourited", _bool),
        sensitive=_optional(data, "sensitive", _bool),
        muted=_optional(data, "muted", _bool),
        spoiler_text=_optional(data, "spoiler_text", _str) or "",
        media_attachments=_list(data, "media_attachments", parse_attachment),
        mentions=_list(data, "mentions", parse_mention),
        tags=_list(data, "tags", parse_tag),
        application=_optional(data, "application", parse_application),
        language=_optional(data, "language", _str),
    )


def parse_notification(value: Any) -> Notification:
    data = _object(value)
    return Notification(
        id=_id(data["id"]),
        notification_type=NotificationType(_str(data["type"])),
        created_at=_datetime(data["created_at"]),
        account=parse_account(data["account"]),
        status=_optional(data, "status", parse_status),
    )


def parse_relationship(value: Any) -> Relationship:
    data = _object(value)
    return Relationship(
        id=_id(data["id"]),
        following=_bool(data["following"]),
        followed_by=_bool(data["followed_by"]),
        blocking=_bool(data["blocking"]),
        muting=_bool(data["muting"]),
        requested=_bool(data["requested"]),
    )


def parse_context(value: Any) -> Context:
    data = _object(value)
    return Context(
        ancestors=parse_list(parse_status)(data["ancestors"]),
        descendants=parse_list(parse_status)(data["descendants"]),
    )


def parse_card(value: Any) -> Card:
    data = _object(value)
    return Card(
        url=_str(data["url"]),
        title=_str(data["title"]),
        description=_str(data["description"]),
        image=_optional(data, "image", _str),
    )


def parse_report(value: Any) -> Report:
    data = _object(value)
    return Report(id=_id(data["id"]), action_taken=_bool(data["action_taken"]))


def parse_instance(value: Any) -> Instance:
    data = _object(value)
    return Instance(
        uri=_str(data["uri"]),
        title=_str(data["title"]),
        description=_str(data["description"]),
        email=_str(data["email"]),
        version=_optional(data, "version", _str),
    )


def parse_search_result(value: Any) -> SearchResult:
    data = _object(value)
    return SearchResult(
        accounts=parse_list(parse_account)(data["accounts"]),
        statuses=parse_list(parse_status)(data["statuses"]),
        hashtags=parse_list(_str)(data["hashtags"]),
    )


def parse_oauth_token(value: Any) -> OAuthToken:
    data = _object(value)
    return OAuthToken(
        access_token=_str(data["access_token"]),
        token_type=_str(data["token_type"]),
        scope=_str(data["scope"]),
        created_at=_epoch(data["created_at"]),
    )


def parse_registered_app(value: Any) -> RegisteredApp:
    data = _object(value)
    return RegisteredApp(
        client_id=_str(data["client_id"]),
        client_secret=_str(data["client_secret"]),
        redirect_uri=_str(data["redirect_uri"]),
        id=_optional(data, "id", _id),
    )


def parse_empty(value: Any) -> Empty:
    """Accept any JSON object except an error envelope."""
    data = _object(value)
    if isinstance(data.get("error"), str):
        raise ValueError("error envelope is not an empty success body")
    return Empty()


def parse_api_error(value: Any, status_code: int | None = None) -> ApiError:
    data = _object(value)
    return ApiError(
        error=_str(data["error"]),
        error_description=_optional(data, "error_description", _str),
        status_code=status_code,
    )


def decode_response(
    body: bytes, decoder: Decoder[T], status_code: int | None = None
) -> T:
    """Decode ``body`` as the expected entity, falling back to an error envelope.

    Raises:
        ApiError: the body is not the expected entity but is an error envelope.
        DecodeError: the body is neither; ``__cause__`` is the first failure.
    """
    try:
        return decoder(json.loads(body))
    except (KeyError, TypeError, ValueError) as first_error:
        try:
            api_error = parse_api_error(json.loads(body), status_code)
        except (KeyError, TypeError, ValueError):
            text = body[:BODY_EXCERPT].decode("utf-8", errors="replace")
            raise DecodeError(
                f"Could not decode response: {_describe(first_error)}",
                status_code=status_code,
                body=text,
            ) from first_error
        raise api_error from None


def _describe(error: Exception) -> str:
    if isinstance(error, KeyError):
        return f"missing field {error.args[0]!r}"
    return str(error)
