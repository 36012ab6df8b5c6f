"""The persistable credential bundle produced by registration.

Serialized form is a JSON object with exactly five fields:
    {
        "base": "https://mastodon.social",
        "client_id": "...",
        "client_secret": "...",
        "redirect": "urn:ietf:wg:oauth:2.0:oob",
        "token": "..."
    }

Writing it to disk is left to the caller.
"""

import json
from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class Data:
    base: str
    client_id: str
    client_secret: str
    redirect: str
    token: str = ""

    def __post_init__(self):
        if bool(self.client_id) != bool(self.client_secret):
            raise ValueError("client_id and client_secret must be set together")

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_dict(cls, data: dict) -> "Data":
        names = [f.name for f in fields(cls)]
        missing = [name for name in names if name not in data]
        if missing:
            raise ValueError(f"Credential data missing fields: {', '.join(missing)}")
        for name in names:
            if not isinstance(data[name], str):
                raise ValueError(f"Credential field {name!r} must be a string")
        return cls(**{name: data[name] for name in names})

    @classmethod
    def from_json(cls, text: str | bytes) -> "Data":
        return cls.from_dict(json.loads(text))

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"Data(base={self.base!r}, client_id={self.client_id!r}, "
            f"redirect={self.redirect!r}, has_token={self.has_token})"
        )
