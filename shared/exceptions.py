"""Client exception hierarchy.

Every failure surfaced to callers extends GarminConnectError and carries a
short title plus a human-readable detail, so callers can tell which class
of failure occurred without parsing messages.
"""

from typing import Any


class GarminConnectError(Exception):
    def __init__(self, title: str, detail: str):
        self.title = title
        self.detail = detail
        super().__init__(detail)


class AuthenticationError(GarminConnectError):
    """Login or session renewal failed, or the service rejected a renewed session."""

    def __init__(self, detail: str, status: int | None = None):
        self.status = status
        super().__init__(title="Authentication Failed", detail=detail)


class HttpError(GarminConnectError):
    def __init__(self, status: int, body: bytes, path: str = ""):
        self.status = status
        self.body = body
        self.path = path
        preview = body[:200].decode("utf-8", errors="replace")
        super().__init__(
            title="HTTP Error",
            detail=f"GET {path or '(unknown)'} returned HTTP {status}: {preview}",
        )


class DeserializationError(GarminConnectError):
    def __init__(self, shape: str, errors: list[dict[str, Any]] | None = None):
        self.shape = shape
        self.errors = errors or []
        super().__init__(
            title="Deserialization Error",
            detail=(
                f"Response body does not match {shape} "
                f"({len(self.errors)} validation error(s))"
            ),
        )


class InvalidArgumentError(GarminConnectError):
    def __init__(self, detail: str):
        super().__init__(title="Invalid Argument", detail=detail)


class TransportError(GarminConnectError):
    def __init__(self, detail: str):
        super().__init__(title="Transport Error", detail=detail)


class PaginationLimitError(GarminConnectError):
    def __init__(self, max_pages: int, collected: int):
        self.max_pages = max_pages
        self.collected = collected
        super().__init__(
            title="Pagination Limit Reached",
            detail=(
                f"Listing still returned items after {max_pages} page(s) "
                f"({collected} item(s) collected); refusing to return a truncated result"
            ),
        )
