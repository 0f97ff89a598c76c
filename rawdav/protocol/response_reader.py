"""
Parsing of raw HTTP responses read from a byte stream.

Nothing in here raises on bad input.  A status line that is not HTTP
gives the BAD_RESPONSE status, a malformed header line is skipped, and a
body without end-of-stream is cut off once the poll budget is used up.
"""
import logging
import re
from typing import Optional
from typing import Tuple
from typing import TYPE_CHECKING

from requests.structures import CaseInsensitiveDict

from rawdav.lib import error
from rawdav.lib.debug import xmlstring
from rawdav.lib.error import log
from rawdav.lib.python_utilities import to_header_str
from rawdav.protocol.types import BAD_RESPONSE
from rawdav.protocol.types import DAVResponse

if TYPE_CHECKING:
    from rawdav.io.base import ByteStream

MAX_LINE = 1024
BODY_CHUNK = 4096
MAX_EMPTY_READS = 10
POLL_INTERVAL = 0.05

HEADER_SEPARATOR = ": "
HEADER_JOINER = "; "

_status_re = re.compile(r"^HTTP/\S+\s+(\d{3})(?:\s+(.*))?$", re.IGNORECASE)


def parse_status_line(line: str) -> Tuple[int, str]:
    """
    Returns (status, reason) for a status line, or (BAD_RESPONSE, "")
    if the line does not look like "HTTP/<version> <code> <reason>".
    """
    match = _status_re.match(line.strip())
    if not match:
        return BAD_RESPONSE, ""
    return int(match.group(1)), (match.group(2) or "").strip()


def read_status_line(stream: "ByteStream") -> Tuple[int, str, bool]:
    """
    Returns (status, reason, eof).  eof is set when the stream ended
    before any data was seen.
    """
    raw = stream.readline(MAX_LINE)
    if not raw:
        error.weirdness("connection closed before a status line was received")
        return BAD_RESPONSE, "", True
    status, reason = parse_status_line(to_header_str(raw))
    if status == BAD_RESPONSE:
        error.weirdness(f"not an HTTP status line: {raw!r}")
    return status, reason, False


def read_headers(stream: "ByteStream") -> CaseInsensitiveDict:
    """
    Reads header lines until the blank line or end of stream.

    Repeated headers are merged into one entry, values joined by "; ".
    """
    headers = CaseInsensitiveDict()
    while True:
        raw = stream.readline(MAX_LINE)
        if not raw or raw in (b"\r\n", b"\n"):
            break
        line = to_header_str(raw)
        name, sep, value = line.partition(HEADER_SEPARATOR)
        if not sep:
            error.weirdness(f"skipping malformed header line: {raw!r}")
            continue
        value = value.strip()
        if name in headers:
            headers[name] = headers[name] + HEADER_JOINER + value
        else:
            headers[name] = value
    return headers


def drain_body(
    stream: "ByteStream",
    max_empty_reads: int = MAX_EMPTY_READS,
    poll_interval: float = POLL_INTERVAL,
) -> bytes:
    """
    Reads the body until end of stream, or until max_empty_reads polls
    in a row have come back without data.

    Content-Length is not trusted and chunked encoding is not decoded.
    For an HTTP/1.0 server closing the connection after the body this
    returns the complete body; otherwise the body may be truncated.
    """
    body = bytearray()
    empty_reads = 0
    while True:
        chunk: Optional[bytes] = stream.read_available(BODY_CHUNK, poll_interval)
        if chunk is None:
            empty_reads += 1
            if empty_reads >= max_empty_reads:
                log.debug(
                    "giving up on the body after %i empty reads" % empty_reads
                )
                break
            continue
        if not chunk:
            break
        body += chunk
        empty_reads = 0
    return bytes(body)


def read_response(
    stream: "ByteStream",
    max_empty_reads: int = MAX_EMPTY_READS,
    poll_interval: float = POLL_INTERVAL,
) -> DAVResponse:
    """
    Reads status line, headers and body from the stream.

    Args:
        stream: A ByteStream positioned at the start of the response
        max_empty_reads: Number of consecutive empty polls tolerated while
            reading the body
        poll_interval: Seconds each body poll waits for data

    Returns:
        DAVResponse, with status BAD_RESPONSE if the status line did not
        parse
    """
    status, reason, eof = read_status_line(stream)
    if eof:
        return DAVResponse(status=status)

    headers = read_headers(stream)
    body = drain_body(stream, max_empty_reads, poll_interval)

    log.debug("response status: %s %s" % (status, reason))
    log.debug("response headers: " + str(dict(headers)))
    if body and log.isEnabledFor(logging.DEBUG):
        log.debug(xmlstring(body))

    return DAVResponse(status=status, headers=headers, body=body, reason=reason)
