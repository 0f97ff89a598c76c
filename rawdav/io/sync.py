"""
Synchronous I/O implementation over a bare TCP socket.
"""

import datetime
import select
import socket
from contextlib import closing
from tempfile import NamedTemporaryFile
from typing import Optional
from typing import Tuple

from rawdav.lib import error
from rawdav.lib.error import log
from rawdav.lib.python_utilities import to_local
from rawdav.lib.python_utilities import to_wire
from rawdav.protocol.request_builder import build_request
from rawdav.protocol.response_reader import MAX_EMPTY_READS
from rawdav.protocol.response_reader import POLL_INTERVAL
from rawdav.protocol.response_reader import read_response
from rawdav.protocol.types import DAVRequest
from rawdav.protocol.types import DAVResponse

_DISCONNECTS = (ConnectionError, socket.timeout)


class SocketStream:
    """
    Buffered reader over a connected socket, implementing ByteStream.

    Connection resets and timeouts are reported as end of stream, the
    response reader never sees a socket exception.
    """

    def __init__(self, sock: socket.socket, buffer_size: int = 4096) -> None:
        self.socket = sock
        self.buffer_size = buffer_size
        self._buffer = bytearray()
        self._eof = False

    def _recv(self) -> bytes:
        try:
            data = self.socket.recv(self.buffer_size)
        except _DISCONNECTS:
            data = b""
        if not data:
            self._eof = True
        return data

    def readline(self, limit: int) -> bytes:
        while b"\n" not in self._buffer and len(self._buffer) < limit:
            if self._eof or not self._recv_into_buffer():
                break
        end = self._buffer.find(b"\n", 0, limit)
        end = limit if end < 0 else end + 1
        line = bytes(self._buffer[:end])
        del self._buffer[:end]
        return line

    def _recv_into_buffer(self) -> bool:
        data = self._recv()
        self._buffer += data
        return bool(data)

    def read_available(self, size: int, timeout: float) -> Optional[bytes]:
        if self._buffer:
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
            return data
        if self._eof:
            return b""
        try:
            readable, _, _ = select.select([self.socket], [], [], timeout)
        except (OSError, ValueError):
            ## socket closed underneath us
            self._eof = True
            return b""
        if not readable:
            return None
        try:
            data = self.socket.recv(size)
        except _DISCONNECTS:
            data = b""
        if not data:
            self._eof = True
        return data


class SocketIO:
    """
    Synchronous I/O shell doing one TCP connection per request.

    This is a thin wrapper that writes DAVRequest objects to a socket
    and reads DAVResponse objects back.

    Example:
        io = SocketIO(("dav.example.com", 80))
        response = io.execute(protocol.propfind_request("/files/", depth=1))
    """

    def __init__(
        self,
        address: Tuple[str, int],
        connect_timeout: Optional[float] = None,
        max_empty_reads: int = MAX_EMPTY_READS,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        """
        Initialize the socket I/O handler.

        Args:
            address: (host, port) to connect to, the proxy if one is used
            connect_timeout: Seconds to wait for the TCP connect, None blocks
            max_empty_reads: Consecutive empty polls tolerated for the body
            poll_interval: Seconds each body poll waits for data
        """
        self.address = address
        self.connect_timeout = connect_timeout
        self.max_empty_reads = max_empty_reads
        self.poll_interval = poll_interval

    def connect(self) -> Optional[socket.socket]:
        try:
            sock = socket.create_connection(self.address, self.connect_timeout)
        except OSError as e:
            log.warning("could not connect to %s:%s - %s" % (*self.address, e))
            return None
        sock.settimeout(None)
        return sock

    def execute(self, request: DAVRequest) -> Optional[DAVResponse]:
        """
        Execute a DAVRequest and return DAVResponse.

        Args:
            request: The request to execute

        Returns:
            DAVResponse with status, headers, and body, or None when the
            connection could not be opened or the request not sent
        """
        raw = build_request(request.method, request.target, request.headers, request.body)
        log.debug(
            "sending request - method={0}, target={1}, headers={2}\nbody:\n{3}".format(
                request.method_name,
                request.target,
                request.headers,
                printable_body(request.body),
            )
        )

        sock = self.connect()
        if sock is None:
            return None
        with closing(sock):
            try:
                sock.sendall(raw)
            except OSError as e:
                log.warning("could not send request to %s:%s - %s" % (*self.address, e))
                return None
            response = read_response(
                SocketStream(sock),
                max_empty_reads=self.max_empty_reads,
                poll_interval=self.poll_interval,
            )
        log.debug("server responded with %i %s" % (response.status, response.reason))

        if error.debug_dump_communication:
            dump_communication(raw, response)
        return response

    def close(self) -> None:
        """Nothing is kept open between requests."""
        pass

    def __enter__(self) -> "SocketIO":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def printable_body(body: Optional[bytes]) -> str:
    if not body:
        return ""
    try:
        return to_local(body)
    except UnicodeDecodeError:
        return "<%i bytes of binary data>" % len(body)


def dump_communication(raw_request: bytes, response: DAVResponse) -> None:
    with NamedTemporaryFile(prefix="rawdavcomm", delete=False) as commlog:
        commlog.write(b"=" * 80 + b"\n")
        commlog.write(f"{datetime.datetime.now():%FT%H:%M:%S}".encode("utf-8"))
        commlog.write(b"\n====>\n")
        commlog.write(raw_request)
        commlog.write(b"<====\n")
        commlog.write(f"{response.status} {response.reason}\n".encode("utf-8"))
        commlog.write(
            b"\n".join(
                to_wire(f"{x}: {response.headers[x]}") for x in response.headers
            )
        )
        commlog.write(b"\n\n")
        commlog.write(response.body)
        commlog.write(b"\n")
