# =============================================================================
# core/models/http.py - Request and Response Models
# =============================================================================
# These models are the only data passed between stages:
# - Request: What the client sent, plus attributes stages attach on the way in
# - Response: What the terminal handler (or an intercepting stage) produced
#
# Both are frozen. Stages derive new copies with the with_*() helpers
# instead of mutating, so an outer stage always sees the request it passed on.
# =============================================================================

from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def reason_phrase(status_code: int) -> str:
    """
    Return the canonical reason phrase for an HTTP status code.

    Example:
        reason_phrase(403)  # "Forbidden"
        reason_phrase(299)  # "Unknown Status"
    """
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown Status"


class Request(BaseModel):
    """
    Immutable request passed down the chain.

    Header names are stored lower-cased. Attributes carry per-request
    values attached by stages (route params, the template renderer,
    the diagnostic hook).

    Example:
        request = Request(method="GET", path="/hello/ada")
        request = request.with_attribute("route_params", {"name": "ada"})
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(
        default="GET",
        description="HTTP method (upper-case)"
    )

    path: str = Field(
        default="/",
        description="Request path, always starting with '/'"
    )

    query: dict[str, str] = Field(
        default_factory=dict,
        description="Query string parameters (last value wins)"
    )

    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Request headers keyed by lower-cased name"
    )

    body: bytes = Field(
        default=b"",
        description="Raw request body"
    )

    attributes: dict[str, Any] = Field(
        default_factory=dict,
        description="Values attached by stages while the request travels down the chain"
    )

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "Request":
        """Return a copy of this request with one attribute set."""
        attributes = dict(self.attributes)
        attributes[name] = value
        return self.model_copy(update={"attributes": attributes})

    def accepts(self, media_type: str, explicit: bool = False) -> bool:
        """
        Check whether the Accept header allows the given media type.

        A missing Accept header, "*/*" and "type/*" ranges all count as a
        match unless explicit=True, in which case only the exact media type
        does. Quality values are ignored except for q=0, which excludes
        the range.
        """
        accept = self.header("accept")
        if not accept:
            return not explicit

        main_type = media_type.split("/", 1)[0]
        allowed = (media_type,) if explicit else ("*/*", media_type, f"{main_type}/*")
        for part in accept.split(","):
            pieces = [p.strip() for p in part.split(";")]
            media_range = pieces[0].lower()
            if any(p.replace(" ", "") in ("q=0", "q=0.0") for p in pieces[1:]):
                continue
            if media_range in allowed:
                return True
        return False

    def prefers_json(self) -> bool:
        """True when the client explicitly asks for JSON."""
        return self.accepts("application/json", explicit=True)

    def prefers_html(self) -> bool:
        """True when the client explicitly asks for HTML (browsers do)."""
        return self.accepts("text/html", explicit=True)


class Response(BaseModel):
    """
    Immutable response returned up the chain.

    Example:
        response = Response(status_code=404, body="Not found")
        response = response.with_header("X-Handled-By", "errors")
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(
        default=200,
        ge=100,
        le=599,
        description="HTTP status code"
    )

    body: str = Field(
        default="",
        description="Response body"
    )

    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Response headers"
    )

    media_type: str = Field(
        default="text/plain",
        description="Content type of the body"
    )

    @property
    def reason_phrase(self) -> str:
        return reason_phrase(self.status_code)

    def with_status(self, status_code: int) -> "Response":
        return self._derive(status_code=status_code)

    def write(self, text: str) -> "Response":
        """Return a copy with text appended to the body."""
        return self._derive(body=self.body + text)

    def with_header(self, name: str, value: str) -> "Response":
        headers = dict(self.headers)
        headers[name] = value
        return self._derive(headers=headers)

    def _derive(self, **changes: Any) -> "Response":
        # model_copy() does not validate
        return type(self).model_validate({**self.model_dump(), **changes})

    @classmethod
    def html(cls, body: str, status_code: int = 200) -> "Response":
        return cls(status_code=status_code, body=body, media_type="text/html")

    @classmethod
    def json_body(cls, body: str, status_code: int = 200) -> "Response":
        return cls(status_code=status_code, body=body, media_type="application/json")
