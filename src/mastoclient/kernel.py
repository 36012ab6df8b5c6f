"""The single code path every API call goes through.

A call is: compose ``base + path`` (plus query string), attach the bearer
token, encode the body, send it synchronously, drain the whole body, then
decode it with parser.decode_response(). Nothing here retries; every failure
is raised to the caller as a MastodonError subclass.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote_plus, urlsplit

import httpx

from .errors import AccessTokenRequired, HttpError, ResponseReadError, UrlParseError
from .parser import Decoder, T, decode_response

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/"

Params = Mapping[str, Any] | Iterable[tuple[str, Any]]


def normalize_base(base: str) -> str:
    """Validate an instance origin and strip any trailing slash."""
    if any(ch.isspace() for ch in base):
        raise UrlParseError(base, "contains whitespace")
    try:
        parts = urlsplit(base)
        parts.port  # ValueError for a non-numeric port
        httpx.URL(base)
    except (ValueError, httpx.InvalidURL) as e:
        raise UrlParseError(base, str(e)) from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise UrlParseError(base)
    return base.rstrip("/")


def _pairs(params: Params) -> Iterable[tuple[str, Any]]:
    if isinstance(params, Mapping):
        return params.items()
    return params


def encode_query(params: Params) -> str:
    """URL-encode query parameters.

    None and False are omitted, True is sent as ``1``. A list with one element
    is sent as ``name=v``; longer lists as ``name[]=v1&name[]=v2``. Only the
    generated ``[]`` suffix stays literal; brackets in names or values are
    escaped.
    """
    pairs: list[str] = []

    def add(name: str, value: Any, suffix: str = "") -> None:
        pairs.append(f"{quote_plus(name)}{suffix}={quote_plus(str(value))}")

    for name, value in _pairs(params):
        if value is None or value is False:
            continue
        if value is True:
            add(name, "1")
        elif isinstance(value, (list, tuple)):
            if len(value) == 1:
                add(name, value[0])
            else:
                for item in value:
                    add(name, item, "[]")
        else:
            add(name, value)
    return "&".join(pairs)


def encode_form(fields: Params) -> dict[str, str | list[str]]:
    """Form-urlencoded body fields, in the mapping shape httpx expects.

    Booleans are sent as ``true``/``false``, lists as repeated ``name[]``
    fields, and None values are left out.
    """
    form: dict[str, str | list[str]] = {}
    for name, value in _pairs(fields):
        if value is None:
            continue
        if isinstance(value, bool):
            form[name] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            form[f"{name}[]"] = [str(item) for item in value]
        else:
            form[name] = str(value)
    return form


def api_url(base: str, endpoint: str, params: Params | None = None) -> str:
    """Build ``<base>/api/v1/<endpoint>[?query]``."""
    return build_url(base, API_PREFIX + endpoint.lstrip("/"), params)


def build_url(base: str, path: str, params: Params | None = None) -> str:
    url = base + path
    if params:
        query = encode_query(params)
        if query:
            url = f"{url}?{query}"
    return url


def send(
    http: httpx.Client,
    method: str,
    url: str,
    decoder: Decoder[T],
    *,
    token: str | None = None,
    data: Mapping[str, Any] | None = None,
    json: Any = None,
    files: Mapping[str, Any] | None = None,
) -> T:
    """Execute one request and decode the response body.

    Args:
        http: Transport shared by every call of a client.
        method: HTTP method.
        url: Absolute URL, query string included.
        decoder: Parser for the expected entity.
        token: Bearer token. None sends an unauthenticated request; an
            empty string raises AccessTokenRequired.
        data: Form-urlencoded fields (multipart when ``files`` is given).
        json: JSON body.
        files: Multipart file fields.
    """
    headers = {}
    if token is not None:
        if not token:
            raise AccessTokenRequired()
        headers["Authorization"] = f"Bearer {token}"

    try:
        request = http.build_request(
            method, url, headers=headers, data=data, json=json, files=files
        )
    except httpx.InvalidURL as e:
        raise UrlParseError(url, str(e)) from e

    # Request line and status only. Errors are raised, and headers (the token)
    # are never logged.
    logger.debug("%s %s", method, request.url)
    try:
        response = http.send(request, stream=True)
    except httpx.InvalidURL as e:
        raise UrlParseError(url, str(e)) from e
    except httpx.HTTPError as e:
        raise HttpError(f"{method} {url} failed: {e}") from e

    try:
        body = response.read()
    except (httpx.HTTPError, httpx.StreamError) as e:
        raise ResponseReadError(f"Reading response from {url} failed: {e}") from e
    finally:
        response.close()

    logger.debug(
        "%s %s -> %d (%d bytes)", method, request.url, response.status_code, len(body)
    )
    return decode_response(body, decoder, response.status_code)
