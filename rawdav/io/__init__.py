"""
I/O layer for the WebDAV client.

This module provides the socket implementation executing DAVRequest
objects and returning DAVResponse objects.

The I/O layer is intentionally thin - it only handles the TCP transport.
Request formatting and response parsing live in rawdav.protocol.

Example:
    from rawdav.protocol import WebDAVProtocol
    from rawdav.io import SocketIO

    protocol = WebDAVProtocol()
    with SocketIO(("dav.example.com", 80)) as io:
        request = protocol.propfind_request("/files/", depth=1)
        response = io.execute(request)
"""

from .base import ByteStream, SyncIOProtocol
from .sync import SocketIO, SocketStream

__all__ = [
    # Protocols
    "ByteStream",
    "SyncIOProtocol",
    # Implementations
    "SocketIO",
    "SocketStream",
]
