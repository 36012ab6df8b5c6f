"""Exceptions raised by the client.

Every failure surfaces as a subclass of MastodonError. The ``kind`` attribute
names the failure category so callers can branch on it without importing
every class:

    API                     the service answered with an error envelope
    SERDE                   the body matched neither the entity nor an error
    HTTP                    transport failure (DNS, connect, TLS, protocol)
    IO                      the response body could not be drained
    URL_PARSE               a base or constructed URL is malformed
    CLIENT_ID_REQUIRED      registration step needs a client_id
    CLIENT_SECRET_REQUIRED  registration step needs a client_secret
    ACCESS_TOKEN_REQUIRED   authenticated call made without a token
"""


class MastodonError(Exception):
    kind = "MASTODON"


class ApiError(MastodonError):
    """Error envelope returned by the service: ``{error, error_description?}``."""

    kind = "API"

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
        status_code: int | None = None,
    ):
        self.error = error
        self.error_description = error_description
        self.status_code = status_code
        message = error
        if error_description:
            message = f"{error}: {error_description}"
        super().__init__(message)


class DecodeError(MastodonError):
    """Body decoded as neither the expected entity nor an error envelope.

    The original decode failure is chained as ``__cause__``.
    """

    kind = "SERDE"

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class HttpError(MastodonError):
    kind = "HTTP"


class ResponseReadError(MastodonError):
    kind = "IO"


class UrlParseError(MastodonError):
    kind = "URL_PARSE"

    def __init__(self, url: str, reason: str = "not an absolute URL"):
        self.url = url
        super().__init__(f"Invalid URL {url!r}: {reason}")


class ClientIdRequired(MastodonError):
    kind = "CLIENT_ID_REQUIRED"

    def __init__(self):
        super().__init__("client_id is required; call register() first")


class ClientSecretRequired(MastodonError):
    kind = "CLIENT_SECRET_REQUIRED"

    def __init__(self):
        super().__init__("client_secret is required; call register() first")


class AccessTokenRequired(MastodonError):
    kind = "ACCESS_TOKEN_REQUIRED"

    def __init__(self):
        super().__init__("An access token is required for this endpoint")
