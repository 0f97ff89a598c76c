"""
Core protocol types for the raw-socket WebDAV client.

These dataclasses represent HTTP requests and responses at the protocol level,
independent of any I/O implementation.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

from requests.structures import CaseInsensitiveDict

from rawdav.lib import error

## Status code used when the first line of a response is not an HTTP status line
BAD_RESPONSE = -2

_charset_re = re.compile(r"charset=\"?([\w.:-]+)", re.IGNORECASE)


class DAVMethod(Enum):
    """HTTP/1.0 and WebDAV methods supported by the client."""

    HEAD = "HEAD"
    GET = "GET"
    OPTIONS = "OPTIONS"
    POST = "POST"
    PUT = "PUT"
    MOVE = "MOVE"
    COPY = "COPY"
    MKCOL = "MKCOL"
    DELETE = "DELETE"
    PROPFIND = "PROPFIND"
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    This is a pure data structure with no I/O. It describes what request
    should be made, but does not make it.

    Attributes:
        method: HTTP method (GET, PUT, PROPFIND, etc.), or a plain token
        target: Request target as given by the caller, never escaped
        headers: HTTP headers in the order they will be sent
        body: Request body as bytes (optional)
    """

    method: Union[DAVMethod, str]
    target: str
    headers: Dict[str, object] = field(default_factory=dict)
    body: Optional[bytes] = None

    @property
    def method_name(self) -> str:
        if isinstance(self.method, DAVMethod):
            return self.method.value
        return str(self.method)

    def with_header(self, name: str, value: object) -> "DAVRequest":
        """Return new request with additional header."""
        new_headers = {**self.headers, name: value}
        return DAVRequest(
            method=self.method,
            target=self.target,
            headers=new_headers,
            body=self.body,
        )

    def with_body(self, body: bytes) -> "DAVRequest":
        """Return new request with body."""
        return DAVRequest(
            method=self.method,
            target=self.target,
            headers=self.headers,
            body=body,
        )


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    This is a pure data structure with no I/O. It contains the response
    data but does not fetch it.

    When the server repeats a header (typically ``Set-Cookie``), the
    values are joined with ``"; "`` into a single entry rather than the
    last one winning.  Multi-value semantics are lost, but no value is.

    Attributes:
        status: HTTP status code, or BAD_RESPONSE
        headers: HTTP headers, case-insensitive lookup
        body: Response body as raw bytes
        reason: Reason phrase from the status line
    """

    status: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    reason: str = ""

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_multistatus(self) -> bool:
        """True if this is a 207 Multi-Status response."""
        return self.status == 207

    @property
    def bad_response(self) -> bool:
        """True if the status line could not be parsed."""
        return self.status == BAD_RESPONSE

    @property
    def text(self) -> str:
        content_type = self.headers.get("Content-Type", "")
        match = _charset_re.search(content_type)
        charset = match.group(1) if match else "utf-8"
        try:
            return self.body.decode(charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def validate_status(self, method: Optional[str] = None, url: Optional[str] = None) -> "DAVResponse":
        """
        Raise the matching DAVError if the response is not a success.

        The reader itself never raises; this is for callers who prefer
        exceptions over inspecting the status code.
        """
        if self.status in (401, 403):
            raise error.AuthorizationError(url=url, reason=self.reason or str(self.status))
        if self.status == 404:
            raise error.NotFoundError(url=url, reason=self.reason or "404")
        if self.bad_response:
            raise error.ResponseError(url=url, reason="no valid status line received")
        if self.status >= 400:
            exc = error.exception_by_method[(method or "").lower()]
            raise exc(url=url, reason=error.errmsg(self))
        return self
