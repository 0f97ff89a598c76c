"""
Pure functions for building HTTP/1.0 requests and their bodies.

All functions in this module are pure - they take data in and return bytes
out, with no side effects or I/O.
"""
from typing import Mapping
from typing import Optional
from typing import Union
from urllib.parse import quote_plus

from rawdav.lib.python_utilities import to_wire
from rawdav.protocol.types import DAVMethod

CRLF = "\r\n"

LOCK_BODY_TEMPLATE = """<?xml version="1.0" encoding="utf-8" ?>
<D:lockinfo xmlns:D='DAV:'>
<D:lockscope><D:{scope}/></D:lockscope>
<D:locktype><D:{lock_type}/></D:locktype>
\t<D:owner><D:href>{owner}</D:href></D:owner>
</D:lockinfo>
"""


def build_request(
    method: Union[DAVMethod, str],
    target: str,
    headers: Optional[Mapping[str, object]] = None,
    body: Union[bytes, str, None] = None,
) -> bytes:
    """
    Build the bytes of an HTTP/1.0 request.

    The request line and the headers come first, in the order given.  A
    Content-Length header is added whenever the body is non-empty,
    replacing any value the caller may have set.  The request always
    ends with an extra CRLF: without a body that CRLF terminates the
    header block, with a body it follows the body.

    Args:
        method: DAVMethod or a plain method token
        target: Request target, sent as-is
        headers: Header names and values, values are passed through str()
        body: Request body, str is UTF-8 encoded

    Returns:
        The request, ready for the socket
    """
    if isinstance(method, DAVMethod):
        method = method.value
    body = to_wire(body)

    headers = dict(headers or {})
    if body:
        for name in [x for x in headers if x.lower() == "content-length"]:
            del headers[name]
        headers["Content-Length"] = len(body)

    head = f"{method} {target} HTTP/1.0{CRLF}"
    for name, value in headers.items():
        head += f"{name}: {value}{CRLF}"

    if body:
        return (head + CRLF).encode("utf-8") + body + CRLF.encode("utf-8")
    return (head + CRLF).encode("utf-8")


def build_form_body(params: Mapping[str, object]) -> bytes:
    """
    Serialize a mapping as application/x-www-form-urlencoded.

    >>> build_form_body({"login": "tiger", "password": "secret"})
    b'login=tiger&password=secret'
    """
    pairs = [
        quote_plus(str(key)) + "=" + quote_plus(str(value))
        for key, value in params.items()
    ]
    return "&".join(pairs).encode("utf-8")


def build_lock_body(scope: str, lock_type: str, owner: str) -> bytes:
    """
    Build the lockinfo document for a LOCK request.

    The values are interpolated verbatim, so scope and lock_type must
    be valid element names (``exclusive``/``shared``, ``write``) and the
    owner must not contain XML markup.
    """
    return LOCK_BODY_TEMPLATE.format(
        scope=scope, lock_type=lock_type, owner=owner
    ).encode("utf-8")
