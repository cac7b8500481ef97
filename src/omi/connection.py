"""
Connection lifecycle for the SAS metadata server.

A ConnectionManager owns at most one Session at a time. The ``session()``
context manager runs validate -> connect -> body -> disconnect and always
disconnects once a connection was made.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from .exceptions import ConnectionError, OMIDemoError, PortOutOfRangeError
from .remote import Session, connect_com

MIN_PORT = 1
MAX_PORT = 65535

Connector = Callable[["ConnectionParameters"], Session]


@dataclass(frozen=True)
class ConnectionParameters:
    """Metadata server location and credentials."""
    host: str
    port: int
    user: str
    password: str = field(repr=False)
    auth_domain: Optional[str] = None

    def validate(self) -> None:
        """
        Check the parameters before any connection attempt.

        Raises:
            PortOutOfRangeError: If port is outside 1...65535
        """
        if self.port < MIN_PORT or self.port > MAX_PORT:
            raise PortOutOfRangeError(self.port)


class ConnectionManager:
    """
    Manages a single session with the SAS metadata server.
    """

    def __init__(self, params: ConnectionParameters, connector: Optional[Connector] = None):
        self.params = params
        self.connector = connector or connect_com
        self.session_handle: Optional[Session] = None
        self.logger = logging.getLogger(__name__)

    @property
    def connected(self) -> bool:
        return self.session_handle is not None

    def validate(self) -> None:
        """Validate the connection parameters."""
        self.params.validate()

    def connect(self) -> Session:
        """
        Establish a session with the metadata server.

        Returns:
            Session: The authenticated session

        Raises:
            ConfigError: If the parameters are invalid
            ConnectionError: If a session is already open or cannot be established
            AuthenticationError: If the server rejects the credentials
        """
        if self.session_handle is not None:
            raise ConnectionError("Already connected to the SAS metadata server")

        self.validate()

        self.logger.info(
            "Attempting to connect to SAS metadata server %s:%s as user '%s'.",
            self.params.host, self.params.port, self.params.user
        )

        try:
            session = self.connector(self.params)
        except OMIDemoError:
            self.logger.error("Failed to connect to the SAS metadata server.")
            raise
        except Exception as e:
            error_msg = f"Failed to connect to {self.params.host}:{self.params.port}: {e}"
            self.logger.error(error_msg)
            raise ConnectionError(error_msg) from e

        self.session_handle = session
        self.logger.info(
            "Successfully connected to SAS metadata server as '%s' (%s)",
            session.user_name or self.params.user, session.identity
        )
        return session

    def disconnect(self) -> None:
        """Close the session, if any."""
        if self.session_handle is None:
            return
        try:
            self.logger.info("Disconnecting from SAS metadata server.")
            self.session_handle.close()
        except Exception as e:
            self.logger.warning(f"Error during disconnect: {e}")
        finally:
            self.session_handle = None

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a connected session and disconnect on every exit path."""
        session = self.connect()
        try:
            yield session
        finally:
            self.disconnect()
