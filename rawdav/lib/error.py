#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional

from rawdav import __version__

## Environmental variables prepended with "PYTHON_RAWDAV" are used for debug purposes,
## environmental variables prepended with "WEBDAV_" are for connection parameters
debug_dump_communication = os.environ.get("PYTHON_RAWDAV_COMMDUMP", False)

## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_RAWDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__ or __version__ == "(unknown)":
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("rawdav")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status, r.reason, r.text)


def weirdness(*reasons):
    from rawdav.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class AuthorizationError(DAVError):
    """
    The server answered with HTTP 401 or 403.  The url property will
    contain the url in question, the reason property will contain the
    excuse the server sent.
    """

    pass


class NotFoundError(DAVError):
    pass


class ResponseError(DAVError):
    """
    The server did not answer with something that looks like HTTP, or
    answered with an error status for a method without a dedicated
    exception class.
    """

    pass


class PropfindError(DAVError):
    pass


class MkcolError(DAVError):
    pass


class PutError(DAVError):
    pass


class PostError(DAVError):
    pass


class DeleteError(DAVError):
    pass


class MoveError(DAVError):
    pass


class CopyError(DAVError):
    pass


class LockError(DAVError):
    pass


class UnlockError(DAVError):
    pass


exception_by_method: Dict[str, DAVError] = defaultdict(lambda: ResponseError)
for method in (
    "delete",
    "put",
    "post",
    "mkcol",
    "propfind",
    "move",
    "copy",
    "lock",
    "unlock",
):
    exception_by_method[method] = locals()[method[0].upper() + method[1:] + "Error"]
