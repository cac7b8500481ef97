"""
Remote collaborator for the SAS Open Metadata Interface (OMI).

The metadata protocol itself lives in the vendor's Integration Technologies
client, which is exposed on Windows as a set of COM classes. This module
describes the subset of the IOMI interface the demo uses and adapts the COM
object to it.
"""

import logging
from typing import Any, Optional, Protocol, Tuple

from .exceptions import AuthenticationError, ConnectionError, RemoteError

logger = logging.getLogger(__name__)

# Class identifier of the SAS metadata server, used in the server definition.
METADATA_SERVER_CLASS_ID = "0217E202-B560-11DB-AD91-001083FF6836"

# SASObjectManager.ServerDef protocol value for the SAS bridge protocol.
PROTOCOL_BRIDGE = 2


class OMIFlags:
    """IOMI flag constants."""
    ALL = 1
    FULL_OBJECT = 2
    ALL_SIMPLE = 8
    INCLUDE_SUBTYPES = 16
    ALL_DESCENDANTS = 64
    XMLSELECT = 128
    GET_METADATA = 256
    MATCH_CASE = 512
    SUCCINCT = 2048
    # No SASOMI constants exist for these two.
    DEPENDENCY_USES = 8192
    DEPENDENCY_USED_BY = 16384


class MetadataService(Protocol):
    """Read-only IOMI query methods. Each returns (xml, return code)."""

    def get_repositories(self, flags: int, options: str) -> Tuple[str, int]: ...

    def get_namespaces(self, flags: int, options: str) -> Tuple[str, int]: ...

    def get_types(self, ns: str, flags: int, options: str) -> Tuple[str, int]: ...

    def get_subtypes(self, supertype: str, ns: str, flags: int, options: str) -> Tuple[str, int]: ...

    def get_type_properties(self, type_name: str, ns: str, flags: int, options: str) -> Tuple[str, int]: ...

    def get_metadata_objects(
        self, repos_id: str, type_name: str, ns: str, flags: int, options: str
    ) -> Tuple[str, int]: ...


class Session:
    """
    An authenticated session with the metadata server.

    Holds the service used for remote calls until it is closed.
    """

    def __init__(self, service: MetadataService, user_name: str = "", identity: str = "",
                 handle: Any = None):
        self.service: Optional[MetadataService] = service
        self.user_name = user_name
        self.identity = identity
        self._handle = handle

    @property
    def closed(self) -> bool:
        return self.service is None

    def close(self) -> None:
        """Release the service and any vendor handle. Safe to call repeatedly."""
        self.service = None
        self._handle = None


class ComMetadataService:
    """
    Adapts the vendor IOMI COM object to :class:`MetadataService`.

    IOMI methods take their XML output as a positional ``out`` parameter. A
    placeholder (``pythoncom.Missing`` for a real bridge) fills that slot and
    pywin32 returns the output after the return code, so each call yields
    ``(rc, xml)`` which is swapped into ``(xml, rc)``.
    """

    def __init__(self, iomi: Any, out: Any = None):
        self.iomi = iomi
        self.out = out

    def _call(self, method: str, *args) -> Tuple[str, int]:
        try:
            rc, xml = getattr(self.iomi, method)(*args)
        except Exception as e:
            raise RemoteError(f"IOMI {method} failed: {e}") from e
        return xml, rc

    def get_repositories(self, flags: int, options: str) -> Tuple[str, int]:
        return self._call("GetRepositories", self.out, flags, options)

    def get_namespaces(self, flags: int, options: str) -> Tuple[str, int]:
        return self._call("GetNamespaces", self.out, flags, options)

    def get_types(self, ns: str, flags: int, options: str) -> Tuple[str, int]:
        return self._call("GetTypes", self.out, ns, flags, options)

    def get_subtypes(self, supertype: str, ns: str, flags: int, options: str) -> Tuple[str, int]:
        return self._call("GetSubtypes", supertype, self.out, ns, flags, options)

    def get_type_properties(self, type_name: str, ns: str, flags: int, options: str) -> Tuple[str, int]:
        return self._call("GetTypeProperties", type_name, self.out, ns, flags, options)

    def get_metadata_objects(
        self, repos_id: str, type_name: str, ns: str, flags: int, options: str
    ) -> Tuple[str, int]:
        return self._call("GetMetadataObjects", repos_id, type_name, self.out, ns, flags, options)


def _load_com_client():
    """Return the ``win32com.client`` and ``pythoncom`` modules or raise ``ConnectionError``."""
    try:
        import pythoncom
        import win32com.client
    except ImportError as e:
        raise ConnectionError(
            "The SAS COM bridge requires pywin32. Install with: pip install pywin32"
        ) from e
    return win32com.client, pythoncom


def connect_com(params) -> Session:
    """
    Open a session through the SAS Integration Technologies COM classes.

    Args:
        params: ConnectionParameters for the metadata server

    Returns:
        Session: Session wrapping a :class:`ComMetadataService`

    Raises:
        ConnectionError: If the COM bridge is unavailable
        AuthenticationError: If the server refuses the login
    """
    com, pythoncom = _load_com_client()

    try:
        factory = com.Dispatch("SASObjectManager.ObjectFactoryMulti2")
        server = com.Dispatch("SASObjectManager.ServerDef")
        server.MachineDNSName = params.host
        server.Port = params.port
        server.Protocol = PROTOCOL_BRIDGE
        server.ClassIdentifier = METADATA_SERVER_CLASS_ID
        if params.auth_domain:
            server.AuthenticationDomain = params.auth_domain
    except Exception as e:
        raise ConnectionError(f"Failed to initialise the SAS object factory: {e}") from e

    try:
        iomi = factory.CreateObjectByServer("OMIDemo", True, server, params.user, params.password)
    except Exception as e:
        raise AuthenticationError(
            f"Failed to connect to the SAS metadata server {params.host}:{params.port} "
            f"as user '{params.user}': {e}"
        ) from e

    logger.debug("IOMI object created for %s:%s", params.host, params.port)
    return Session(ComMetadataService(iomi, out=pythoncom.Missing), user_name=params.user, handle=factory)
