"""Payload for posting a new status."""

from dataclasses import dataclass, field

from .models import Visibility


@dataclass
class StatusBuilder:
    status: str
    in_reply_to_id: str | int | None = None
    media_ids: list[str | int] | None = field(default=None)
    sensitive: bool | None = None
    spoiler_text: str | None = None
    visibility: Visibility | None = None

    def to_json(self) -> dict:
        """JSON body for ``POST /api/v1/statuses``; absent fields are left out."""
        payload: dict = {"status": self.status}
        if self.in_reply_to_id is not None:
            payload["in_reply_to_id"] = str(self.in_reply_to_id)
        if self.media_ids is not None:
            payload["media_ids"] = [str(media_id) for media_id in self.media_ids]
        if self.sensitive is not None:
            payload["sensitive"] = self.sensitive
        if self.spoiler_text is not None:
            payload["spoiler_text"] = self.spoiler_text
        if self.visibility is not None:
            payload["visibility"] = Visibility(self.visibility).value
        return payload
