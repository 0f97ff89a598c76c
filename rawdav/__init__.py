#!/usr/bin/env python
import logging

__version__ = "0.9.0"

from .davclient import WebDAVClient
from .davclient import get_davclient
from .protocol import BAD_RESPONSE
from .protocol import DAVResponse

## We should consider if the NullHandler-logic below is needed or not, and
## if there are better alternatives?
# Silence notification of no default logging handler
log = logging.getLogger("rawdav")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = ["__version__", "BAD_RESPONSE", "DAVResponse", "WebDAVClient", "get_davclient"]
