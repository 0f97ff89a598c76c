"""
Sans-I/O WebDAV protocol implementation.

This module provides protocol-level operations without any I/O.
It builds requests and parses responses as pure data transformations.

The protocol layer is organized into:
- types: Core data structures (DAVMethod, DAVRequest, DAVResponse)
- request_builder: Pure functions turning requests into HTTP/1.0 bytes
- response_reader: Parsing of status line, headers and body from a stream
- operations: WebDAVProtocol class with one request builder per verb

Example usage:

    from rawdav.protocol import WebDAVProtocol, build_request, read_response

    protocol = WebDAVProtocol()

    # Build a request (no I/O)
    request = protocol.move_request("/a.txt", "/b.txt", overwrite=False)
    raw = build_request(request.method, request.target, request.headers, request.body)

    # Send raw over your own transport, then parse what comes back
    response = read_response(stream)
"""

from .types import (
    BAD_RESPONSE,
    # Enums
    DAVMethod,
    # Request/Response
    DAVRequest,
    DAVResponse,
)
from .request_builder import (
    build_form_body,
    build_lock_body,
    build_request,
)
from .response_reader import (
    drain_body,
    parse_status_line,
    read_headers,
    read_response,
    read_status_line,
)
from .operations import WebDAVProtocol

__all__ = [
    "BAD_RESPONSE",
    # Enums
    "DAVMethod",
    # Request/Response
    "DAVRequest",
    "DAVResponse",
    # Builders
    "build_form_body",
    "build_lock_body",
    "build_request",
    # Reader
    "drain_body",
    "parse_status_line",
    "read_headers",
    "read_response",
    "read_status_line",
    # Protocol
    "WebDAVProtocol",
]
