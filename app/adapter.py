# =============================================================================
# app/adapter.py - Starlette <-> Core Conversion
# =============================================================================
# The core package never sees Starlette objects. These helpers translate at
# the edge:
# - to_raw_request(): Starlette Request -> RawRequest (unvalidated)
# - to_starlette_response(): core Response -> Starlette Response
# =============================================================================

from fastapi import Request as StarletteRequest
from fastapi.responses import Response as StarletteResponse

from core.models.http import Response
from core.parsing import RawRequest


async def to_raw_request(request: StarletteRequest) -> RawRequest:
    """Copy method, target, headers and body without validating them."""
    # raw_path is still percent-encoded; url.path has already been decoded
    raw_path = request.scope.get("raw_path")
    target = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else request.url.path
    query = request.scope.get("query_string", b"")
    if query:
        target = f"{target}?{query.decode('latin-1')}"

    return RawRequest(
        method=request.method,
        target=target,
        # latin-1 keeps every byte, so invalid names survive until parsing
        headers=[(k.decode("latin-1"), v.decode("latin-1")) for k, v in request.headers.raw],
        body=await request.body(),
    )


def to_starlette_response(response: Response) -> StarletteResponse:
    return StarletteResponse(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers,
        media_type=response.media_type,
    )
