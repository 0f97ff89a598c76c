"""
WebDAV protocol operations: one request builder per verb.

This class provides a high-level interface to the WebDAV verbs while
remaining completely I/O-free.
"""

from typing import Dict, Mapping, Optional, Union

from .request_builder import build_form_body, build_lock_body
from .types import DAVMethod, DAVRequest

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
XML_CONTENT_TYPE = "text/xml; charset=utf-8"

DEPTH_INFINITY = "Infinity"


class WebDAVProtocol:
    """
    Sans-I/O WebDAV protocol handler.

    Builds requests without doing any I/O.  All communication is
    delegated to an external I/O implementation.

    Example:
        protocol = WebDAVProtocol(headers={"Authorization": "Basic dGlnZXI6c2VjcmV0"})

        # Build request
        request = protocol.propfind_request("/files/", depth=1)

        # Execute with your I/O
        response = io.execute(request)
    """

    def __init__(self, headers: Optional[Mapping[str, object]] = None):
        """
        Initialize the protocol handler.

        Args:
            headers: Headers sent with every request, e.g. Authorization
                or Cookie headers built by the caller
        """
        self.headers = dict(headers or {})

    def _headers(
        self,
        extra: Optional[Mapping[str, object]] = None,
        **verb_headers: object,
    ) -> Dict[str, object]:
        headers = dict(self.headers)
        for name, value in [
            *(extra or {}).items(),
            *((k.replace("_", "-"), v) for k, v in verb_headers.items()),
        ]:
            ## header names are case-insensitive, the later spelling wins
            for key in [
                k for k in headers if k.lower() == name.lower() and k != name
            ]:
                del headers[key]
            headers[name] = value
        return headers

    def request(
        self,
        method: Union[DAVMethod, str],
        uri: str,
        headers: Optional[Mapping[str, object]] = None,
        body: Union[bytes, str, None] = None,
    ) -> DAVRequest:
        """
        Build an arbitrary request.

        Args:
            method: DAVMethod or method token
            uri: Request target, sent as-is
            headers: Extra headers for this request
            body: Request body

        Returns:
            DAVRequest ready for execution
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        return DAVRequest(
            method=method,
            target=uri,
            headers=self._headers(headers),
            body=body,
        )

    # =========================================================================
    # Plain HTTP verbs
    # =========================================================================

    def head_request(self, uri: str, headers=None) -> DAVRequest:
        return DAVRequest(DAVMethod.HEAD, uri, self._headers(headers))

    def get_request(self, uri: str, headers=None) -> DAVRequest:
        return DAVRequest(DAVMethod.GET, uri, self._headers(headers))

    def options_request(self, uri: str, headers=None) -> DAVRequest:
        return DAVRequest(DAVMethod.OPTIONS, uri, self._headers(headers))

    def post_request(
        self,
        uri: str,
        params: Union[Mapping[str, object], bytes, str, None] = None,
        headers=None,
    ) -> DAVRequest:
        """
        Build a POST request.

        Args:
            uri: Request target
            params: A mapping is sent form-encoded, e.g.
                ``{"login": "tiger", "password": "secret"}`` becomes
                ``login=tiger&password=secret``.  bytes or str are sent
                as they are.

        Returns:
            DAVRequest ready for execution
        """
        if isinstance(params, Mapping):
            body = build_form_body(params)
        elif isinstance(params, str):
            body = params.encode("utf-8")
        else:
            body = params
        return DAVRequest(
            method=DAVMethod.POST,
            target=uri,
            headers=self._headers(headers, Content_Type=FORM_CONTENT_TYPE),
            body=body,
        )

    def put_request(
        self, uri: str, content: Union[bytes, str], headers=None
    ) -> DAVRequest:
        """
        Build a PUT request.  The content is sent verbatim, binary content
        is fine.  Servers typically answer 201 Created or 204 No Content.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        return DAVRequest(DAVMethod.PUT, uri, self._headers(headers), content)

    def delete_request(self, uri: str, headers=None) -> DAVRequest:
        return DAVRequest(DAVMethod.DELETE, uri, self._headers(headers))

    # =========================================================================
    # WebDAV verbs
    # =========================================================================

    def move_request(
        self, src: str, dest: str, overwrite: bool = True, headers=None
    ) -> DAVRequest:
        """
        Build a MOVE request.

        Args:
            src: Current location of the resource
            dest: New location, sent in the Destination header as-is
            overwrite: Whether an existing destination may be replaced

        Returns:
            DAVRequest ready for execution
        """
        return DAVRequest(
            method=DAVMethod.MOVE,
            target=src,
            headers=self._headers(
                headers, Overwrite="T" if overwrite else "F", Destination=dest
            ),
        )

    def copy_request(
        self, src: str, dest: str, overwrite: bool = True, headers=None
    ) -> DAVRequest:
        """Build a COPY request, see move_request."""
        return DAVRequest(
            method=DAVMethod.COPY,
            target=src,
            headers=self._headers(
                headers, Overwrite="T" if overwrite else "F", Destination=dest
            ),
        )

    def mkcol_request(self, uri: str, headers=None) -> DAVRequest:
        """Build a MKCOL request, creating a collection."""
        return DAVRequest(DAVMethod.MKCOL, uri, self._headers(headers))

    def propfind_request(
        self,
        uri: str,
        depth: Union[int, str] = 0,
        body: Union[bytes, str, None] = None,
        headers=None,
    ) -> DAVRequest:
        """
        Build a PROPFIND request.

        Args:
            uri: Resource path
            depth: 0 for the resource only, 1 to include its children,
                "Infinity" for the whole tree
            body: Optional propfind XML document.  Without one, servers
                return all properties.

        Returns:
            DAVRequest ready for execution
        """
        if isinstance(depth, str) and depth.lower() == "infinity":
            depth = DEPTH_INFINITY
        if isinstance(body, str):
            body = body.encode("utf-8")
        if body:
            headers = self._headers(
                headers, Content_Type=XML_CONTENT_TYPE, Depth=depth
            )
        else:
            headers = self._headers(headers, Depth=depth)
        return DAVRequest(DAVMethod.PROPFIND, uri, headers, body or None)

    def lock_request(
        self,
        uri: str,
        scope: str,
        lock_type: str,
        owner: str,
        headers=None,
    ) -> DAVRequest:
        """
        Build a LOCK request.

        Args:
            uri: Resource to lock
            scope: "exclusive" or "shared"
            lock_type: "write"
            owner: A URL identifying the lock owner

        Returns:
            DAVRequest ready for execution
        """
        return DAVRequest(
            method=DAVMethod.LOCK,
            target=uri,
            headers=self._headers(headers),
            body=build_lock_body(scope, lock_type, owner),
        )

    def unlock_request(self, uri: str, token: str, headers=None) -> DAVRequest:
        """
        Build an UNLOCK request.  The token is the one handed out by the
        server at lock time, e.g.
        ``opaquelocktoken:e71d4fae-5dec-22d6-fea5-00a0c91e6be4``.
        """
        return DAVRequest(
            method=DAVMethod.UNLOCK,
            target=uri,
            headers=self._headers(headers, Lock_Token=f"<{token}>"),
        )
