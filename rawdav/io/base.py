"""
Abstract I/O protocol definitions.

This module defines the interfaces that the response reader and the
transport implementations follow.
"""

from typing import Optional, Protocol, runtime_checkable

from rawdav.protocol.types import DAVRequest, DAVResponse


@runtime_checkable
class ByteStream(Protocol):
    """
    Protocol defining a readable byte stream.

    The response reader only ever talks to one of these, so it can be fed
    from a socket or from an in-memory buffer.
    """

    def readline(self, limit: int) -> bytes:
        """
        Read one line, including the trailing newline.

        Args:
            limit: Maximum number of bytes to return

        Returns:
            The line, or b"" at end of stream
        """
        ...

    def read_available(self, size: int, timeout: float) -> Optional[bytes]:
        """
        Read whatever arrives within the timeout.

        Args:
            size: Maximum number of bytes to return
            timeout: Seconds to wait for data

        Returns:
            Some bytes, b"" at end of stream, or None if nothing arrived
        """
        ...


@runtime_checkable
class SyncIOProtocol(Protocol):
    """
    Protocol defining the synchronous I/O interface.

    Implementations must provide a way to execute DAVRequest objects
    and return DAVResponse objects synchronously.
    """

    def execute(self, request: DAVRequest) -> Optional[DAVResponse]:
        """
        Execute a request and return the response.

        Args:
            request: The DAVRequest to execute

        Returns:
            DAVResponse with status, headers, and body, or None if no
            connection could be made
        """
        ...

    def close(self) -> None:
        """Close any resources."""
        ...
