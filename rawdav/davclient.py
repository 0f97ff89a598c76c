#!/usr/bin/env python
import json
import os
import sys
from dataclasses import dataclass
from typing import Mapping
from typing import Optional
from typing import Tuple
from typing import Union

from rawdav.io import SocketIO
from rawdav.lib.error import log
from rawdav.protocol import DAVMethod
from rawdav.protocol import DAVRequest
from rawdav.protocol import DAVResponse
from rawdav.protocol import WebDAVProtocol
from rawdav.protocol.response_reader import MAX_EMPTY_READS
from rawdav.protocol.response_reader import POLL_INTERVAL

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

"""
The ``WebDAVClient`` class does the communication with a WebDAV
server: one TCP connection per request, HTTP/1.0 on the wire.  Every
verb method returns a ``DAVResponse``, or ``None`` if the server could
not be reached.

``get_davclient`` will return a WebDAVClient object, based either on
parameters, environmental variables or a configuration file.
"""

DEFAULT_PORT = 80

CONNKEYS = set(
    (
        "host",
        "port",
        "proxy_host",
        "proxy_port",
        "headers",
        "connect_timeout",
        "max_empty_reads",
        "poll_interval",
    )
)

## Values from the environment and config files come in as strings
_CONVERTERS = {
    "port": int,
    "proxy_port": int,
    "connect_timeout": float,
    "max_empty_reads": int,
    "poll_interval": float,
    "headers": json.loads,
}


def _port(port: Union[int, str, None]) -> int:
    if port is None or port == "":
        return DEFAULT_PORT
    return int(port)


@dataclass(frozen=True)
class EndpointConfig:
    """
    Where to connect.  If proxy_host is set, every request goes to the
    proxy instead of the host.  Ports default to 80.
    """

    host: str = ""
    port: Union[int, str, None] = DEFAULT_PORT
    proxy_host: Optional[str] = None
    proxy_port: Union[int, str, None] = None

    @property
    def address(self) -> Tuple[str, int]:
        if self.proxy_host:
            return (self.proxy_host, _port(self.proxy_port))
        return (self.host, _port(self.port))


class WebDAVClient:
    """
    Basic client for WebDAV servers speaking HTTP/1.0.

    Authentication is not done by the client; pass the ready-made
    Authorization or Cookie header through ``headers``, either to the
    constructor (sent with every request) or to a single call::

        client = WebDAVClient("dav.example.com", headers={
            "Authorization": "Basic " + b64encode(b"tiger:secret").decode()})
        response = client.propfind("/files/", depth=1)
        if response is not None and response.is_multistatus:
            parse_my_xml(response.body)

    Responses are not interpreted beyond status line and headers.  The
    body is handed over as raw bytes, XML parsing is up to the caller.
    """

    endpoint: EndpointConfig = None

    def __init__(
        self,
        host: str = "",
        port: Union[int, str, None] = DEFAULT_PORT,
        proxy_host: Optional[str] = None,
        proxy_port: Union[int, str, None] = None,
        headers: Optional[Mapping[str, object]] = None,
        connect_timeout: Optional[float] = None,
        max_empty_reads: int = MAX_EMPTY_READS,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        """
        Args:
          host: hostname or address of the WebDAV server
          port: TCP port, 80 if None or empty
          proxy_host: if set, connect here instead of host
          proxy_port: TCP port of the proxy, 80 if None or empty
          headers: headers sent with every request
          connect_timeout: seconds to wait for the TCP connect, blocks if None
          max_empty_reads: consecutive empty polls tolerated while reading a body
          poll_interval: seconds each body poll waits for data

        A server that keeps the connection open after the body costs
        max_empty_reads * poll_interval seconds per request.
        """
        self.endpoint = EndpointConfig(host, port, proxy_host, proxy_port)
        if proxy_host:
            log.debug("init - proxy: %s:%s" % self.endpoint.address)
        else:
            log.debug("init - server: %s:%s" % self.endpoint.address)
        self.protocol = WebDAVProtocol(headers=headers)
        self.io = SocketIO(
            self.endpoint.address,
            connect_timeout=connect_timeout,
            max_empty_reads=max_empty_reads,
            poll_interval=poll_interval,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        """
        Closes the I/O handler.  Sockets are never kept between
        requests, so this is only for symmetry with other clients.
        """
        self.io.close()

    def execute(self, request: DAVRequest) -> Optional[DAVResponse]:
        return self.io.execute(request)

    def request(
        self,
        method: Union[DAVMethod, str],
        uri: str,
        headers: Optional[Mapping[str, object]] = None,
        body: Union[bytes, str, None] = None,
    ) -> Optional[DAVResponse]:
        """
        Send any request, for methods without a dedicated method here.
        """
        return self.execute(self.protocol.request(method, uri, headers, body))

    def head(self, uri: str, headers=None) -> Optional[DAVResponse]:
        return self.execute(self.protocol.head_request(uri, headers))

    def get(self, uri: str, headers=None) -> Optional[DAVResponse]:
        """
        Send a GET request.  uri may be a path on the server, or a full
        URL when going through a proxy.
        """
        return self.execute(self.protocol.get_request(uri, headers))

    def options(self, uri: str, headers=None) -> Optional[DAVResponse]:
        return self.execute(self.protocol.options_request(uri, headers))

    def post(
        self,
        uri: str,
        params: Union[Mapping[str, object], bytes, str, None] = None,
        headers=None,
    ) -> Optional[DAVResponse]:
        """
        Send a POST request, form-encoding params if it's a mapping::

            client.post("/login.php", {"login": "tiger", "password": "secret"})
        """
        return self.execute(self.protocol.post_request(uri, params, headers))

    def put(
        self, uri: str, content: Union[bytes, str], headers=None
    ) -> Optional[DAVResponse]:
        """
        Upload content to uri.  Expect 201 (Created) or 204 (No Content).
        """
        return self.execute(self.protocol.put_request(uri, content, headers))

    def move(
        self, src: str, dest: str, overwrite: bool = True, headers=None
    ) -> Optional[DAVResponse]:
        """
        Move (rename) src to dest.  dest is a path on the same server,
        not a full URL.  Expect 201 (Created) or 204 (No Content).
        """
        return self.execute(self.protocol.move_request(src, dest, overwrite, headers))

    def copy(
        self, src: str, dest: str, overwrite: bool = True, headers=None
    ) -> Optional[DAVResponse]:
        """
        Copy src to dest, see move.
        """
        return self.execute(self.protocol.copy_request(src, dest, overwrite, headers))

    def mkcol(self, uri: str, headers=None) -> Optional[DAVResponse]:
        """
        Create a collection.  Expect 201 (Created).
        """
        return self.execute(self.protocol.mkcol_request(uri, headers))

    def delete(self, uri: str, headers=None) -> Optional[DAVResponse]:
        """
        Delete a resource.  Expect 204 (No Content).  Deleting a
        collection may give a 207 with per-member errors in the body.
        """
        return self.execute(self.protocol.delete_request(uri, headers))

    def propfind(
        self,
        uri: str,
        depth: Union[int, str] = 0,
        body: Union[bytes, str, None] = None,
        headers=None,
    ) -> Optional[DAVResponse]:
        """
        Fetch properties of uri.  Expect 207 (Multi-Status) with an XML
        body, which is not parsed.

        Args:
          depth: 0 for the resource only, 1 for the resource and its
            children, "Infinity" for the whole tree
          body: optional propfind XML, the server returns all properties
            without one
        """
        return self.execute(self.protocol.propfind_request(uri, depth, body, headers))

    def lock(
        self,
        uri: str,
        scope: str,
        lock_type: str,
        owner: str,
        headers=None,
    ) -> Optional[DAVResponse]:
        """
        Lock uri.  scope is "exclusive" or "shared", lock_type is
        "write", owner is a URL identifying the lock owner.  The lock
        token comes back in the Lock-Token header and in the XML body.
        """
        return self.execute(
            self.protocol.lock_request(uri, scope, lock_type, owner, headers)
        )

    def unlock(self, uri: str, token: str, headers=None) -> Optional[DAVResponse]:
        """
        Release the lock identified by token.  Expect 204 (No Content).
        """
        return self.execute(self.protocol.unlock_request(uri, token, headers))


def _conn_params(params: Mapping[str, object]) -> dict:
    ret = {}
    for key, value in params.items():
        if key not in CONNKEYS:
            log.warning(f"ignoring unknown connection parameter {key}")
            continue
        ## empty values fall back to the WebDAVClient defaults
        if value == "":
            continue
        if key in _CONVERTERS and isinstance(value, str):
            value = _CONVERTERS[key](value)
        ret[key] = value
    return ret


def get_davclient(
    check_config_file: bool = True,
    config_file: str = None,
    config_section: str = None,
    environment: bool = True,
    **config_data,
) -> Optional["WebDAVClient"]:
    """
    This function will yield a WebDAVClient object.  It will not try to
    connect.  It will read configuration from various sources, dependent
    on the parameters given, in this order:

    * Data from the parameters given
    * Environment variables prepended with `WEBDAV_`, like `WEBDAV_HOST`, `WEBDAV_PORT`, `WEBDAV_PROXY_HOST`.
    * Environment variables `WEBDAV_CONFIG_FILE` and `WEBDAV_CONFIG_SECTION` will be honored if environment is set
    * Configuration file, sections with keys prepended with `webdav_`

    Returns None if no configuration was found.
    """
    if config_data:
        return WebDAVClient(**_conn_params(config_data))

    if environment:
        conf = {}
        for conf_key in (
            x
            for x in os.environ
            if x.startswith("WEBDAV_") and not x.startswith("WEBDAV_CONFIG")
        ):
            conf[conf_key[7:].lower()] = os.environ[conf_key]
        if conf:
            return WebDAVClient(**_conn_params(conf))
        if not config_file:
            config_file = os.environ.get("WEBDAV_CONFIG_FILE")
        if not config_section:
            config_section = os.environ.get("WEBDAV_CONFIG_SECTION")

    if check_config_file:
        from . import config

        if not config_section:
            config_section = "default"

        cfg = config.read_config(config_file)
        if cfg:
            section = config.config_section(cfg, config_section)
            conn_params = {}
            for k in section:
                if k.startswith("webdav_") and section[k] not in (None, ""):
                    conn_params[k[7:]] = section[k]
            if conn_params:
                return WebDAVClient(**_conn_params(conn_params))
    return None
