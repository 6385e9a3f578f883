# =============================================================================
# core/parsing.py - Raw Request Parsing
# =============================================================================
# Converts what the server received into a Request. This runs BEFORE the
# chain, so a MalformedInputFailure raised here can only be caught by the
# outermost boundary.
#
# Checks (RFC 9110 token grammar):
# - method is a token
# - header names are tokens
# - header values contain no control characters other than tab
# - the target is an absolute path
# =============================================================================

import re
from urllib.parse import parse_qsl, unquote, urlsplit

from pydantic import BaseModel, Field

from core.failures import MalformedInputFailure
from core.models.http import Request

# tchar = "!" / "#" / "$" / "%" / "&" / "'" / "*" / "+" / "-" / "." /
#         "^" / "_" / "`" / "|" / "~" / DIGIT / ALPHA
_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_CONTROL = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


class RawRequest(BaseModel):
    """
    Request as received, before any validation.

    Headers are kept as an ordered list of pairs because duplicate
    and invalid names must survive until parsing.
    """

    method: str = Field(
        default="GET",
        description="Request method as sent"
    )

    target: str = Field(
        default="/",
        description="Request target: path plus optional query string"
    )

    headers: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Header name/value pairs in arrival order"
    )

    body: bytes = Field(
        default=b"",
        description="Raw request body"
    )


def parse_request(raw: RawRequest) -> Request:
    """
    Validate a raw request and build a Request.

    Duplicate headers are folded into one comma-separated value.

    Raises:
        MalformedInputFailure: If the method, a header or the target is invalid
    """
    if not _TOKEN.fullmatch(raw.method):
        raise MalformedInputFailure(
            f"Invalid request method: {raw.method}",
            details={"method": raw.method},
        )

    headers: dict[str, str] = {}
    for name, value in raw.headers:
        if not _TOKEN.fullmatch(name):
            raise MalformedInputFailure(
                f"Invalid header name: {name}",
                details={"header": name},
            )
        if _CONTROL.search(value):
            raise MalformedInputFailure(
                f"Invalid characters in value of header {name}",
                details={"header": name},
            )
        key = name.lower()
        headers[key] = f"{headers[key]}, {value}" if key in headers else value

    parts = urlsplit(raw.target)
    if parts.scheme or parts.netloc or not parts.path.startswith("/"):
        raise MalformedInputFailure(
            f"Request target must be an absolute path: {raw.target}",
            details={"target": raw.target},
        )

    return Request(
        method=raw.method.upper(),
        path=unquote(parts.path),
        query=dict(parse_qsl(parts.query, keep_blank_values=True)),
        headers=headers,
        body=raw.body,
    )
