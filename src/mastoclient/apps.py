"""App descriptor sent when registering with an instance."""

from dataclasses import dataclass
from enum import Enum

# Out-of-band redirect: the user copies the authorization code by hand
OOB_REDIRECT = "urn:ietf:wg:oauth:2.0:oob"

# Canonical token order on the wire
SCOPE_ORDER = ("read", "write", "follow")


class Scope(str, Enum):
    """Permission set requested by an app.

    Values are the wire form: lowercase tokens, space separated, always in
    read/write/follow order.
    """

    READ = "read"
    WRITE = "write"
    FOLLOW = "follow"
    READ_WRITE = "read write"
    READ_FOLLOW = "read follow"
    WRITE_FOLLOW = "write follow"
    READ_WRITE_FOLLOW = "read write follow"

    @classmethod
    def parse(cls, text: str) -> "Scope":
        """Build a Scope from tokens in any order, e.g. ``"follow read"``."""
        tokens = set(text.replace(",", " ").split())
        unknown = tokens - set(SCOPE_ORDER)
        if not tokens or unknown:
            raise ValueError(f"Invalid scope: {text!r}")
        return cls(" ".join(t for t in SCOPE_ORDER if t in tokens))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AppBuilder:
    client_name: str
    redirect_uris: str  # comma separated when more than one
    scopes: Scope = Scope.READ
    website: str | None = None

    def to_form(self) -> dict[str, str]:
        """Form payload for ``POST /api/v1/apps``."""
        form = {
            "client_name": self.client_name,
            "redirect_uris": self.redirect_uris,
            "scopes": self.scopes.value,
        }
        if self.website:
            form["website"] = self.website
        return form
