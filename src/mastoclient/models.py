"""Entities returned by the service.

All entities are immutable and built only by the decoders in parser.py.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Visibility(str, Enum):
    DIRECT = "direct"
    PRIVATE = "private"
    UNLISTED = "unlisted"
    PUBLIC = "public"


class NotificationType(str, Enum):
    MENTION = "mention"
    REBLOG = "reblog"
    FAVOURITE = "favourite"
    FOLLOW = "follow"


class AttachmentType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    GIFV = "gifv"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Source:
    """Profile fields only present on the authenticated user's own account."""

    privacy: Visibility | None = None
    sensitive: bool | None = None
    note: str | None = None


@dataclass(frozen=True)
class Account:
    id: str
    username: str
    acct: str  # username, plus @domain for remote accounts
    display_name: str
    note: str  # HTML
    url: str
    avatar: str
    header: str
    locked: bool
    created_at: datetime
    followers_count: int
    following_count: int
    statuses_count: int
    avatar_static: str | None = None
    header_static: str | None = None
    source: Source | None = None


@dataclass(frozen=True)
class Mention:
    id: str
    username: str
    acct: str
    url: str


@dataclass(frozen=True)
class Tag:
    name: str
    url: str


@dataclass(frozen=True)
class Application:
    name: str
    website: str | None = None


@dataclass(frozen=True)
class Attachment:
    id: str
    attachment_type: AttachmentType
    url: str
    preview_url: str
    remote_url: str | None = None
    text_url: str | None = None


@dataclass(frozen=True)
class Status:
    id: str
    uri: str
    account: Account
    content: str  # HTML
    created_at: datetime
    reblogs_count: int
    favourites_count: int
    visibility: Visibility
    url: str | None = None
    in_reply_to_id: str | None = None
    in_reply_to_account_id: str | None = None
    reblog: "Status | None" = None
    reblogged: bool | None = None
    favourited: bool | None = None
    sensitive: bool | None = None
    muted: bool | None = None
    spoiler_text: str = ""
    media_attachments: list[Attachment] = field(default_factory=list)
    mentions: list[Mention] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    application: Application | None = None
    language: str | None = None


@dataclass(frozen=True)
class Notification:
    id: str
    notification_type: NotificationType  # "type" on the wire
    created_at: datetime
    account: Account
    status: Status | None = None


@dataclass(frozen=True)
class Relationship:
    id: str
    following: bool
    followed_by: bool
    blocking: bool
    muting: bool
    requested: bool


@dataclass(frozen=True)
class Context:
    ancestors: list[Status] = field(default_factory=list)
    descendants: list[Status] = field(default_factory=list)


@dataclass(frozen=True)
class Card:
    url: str
    title: str
    description: str
    image: str | None = None


@dataclass(frozen=True)
class Report:
    id: str
    action_taken: bool


@dataclass(frozen=True)
class Instance:
    uri: str
    title: str
    description: str
    email: str
    version: str | None = None


@dataclass(frozen=True)
class SearchResult:
    accounts: list[Account] = field(default_factory=list)
    statuses: list[Status] = field(default_factory=list)
    hashtags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OAuthToken:
    access_token: str
    token_type: str
    scope: str
    created_at: datetime


@dataclass(frozen=True)
class Empty:
    """Returned when the service answers a successful call with ``{}``."""


@dataclass(frozen=True)
class RegisteredApp:
    """Response to ``POST /api/v1/apps``."""

    client_id: str
    client_secret: str
    redirect_uri: str
    id: str | None = None
