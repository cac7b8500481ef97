"""
Custom exceptions for the OMI demo client.
"""

from typing import Optional


class OMIDemoError(Exception):
    """Base exception for all OMI demo client errors."""
    pass


class ConfigError(OMIDemoError):
    """Raised when command line configuration is invalid."""
    pass


class PortOutOfRangeError(ConfigError):
    """Raised when the metadata server port is outside 1...65535."""

    def __init__(self, port: int):
        super().__init__(
            f"SAS metadata server port number must be in the range 1...65535 (got {port})."
        )
        self.port = port


class UsageError(ConfigError):
    """Raised when the command line cannot be parsed."""
    pass


class ArgError(OMIDemoError):
    """Raised when task-specific positional arguments are invalid."""
    pass


class WrongArgCountError(ArgError):
    """Raised when a task receives the wrong number of extra arguments."""

    def __init__(self, task_name: str, expected: int, actual: int, arg_names=()):
        if arg_names:
            needed = f" ({', '.join(arg_names)})"
        else:
            needed = ""
        super().__init__(
            f"The {task_name} metadata task requires {expected} extra argument(s){needed}, "
            f"got {actual}."
        )
        self.task_name = task_name
        self.expected = expected
        self.actual = actual


class TaskError(OMIDemoError):
    """Raised when a metadata task cannot be dispatched."""
    pass


class UnknownTaskError(TaskError):
    """Raised when the requested task name is not registered."""

    def __init__(self, name: str, known=()):
        message = f"Unknown task requested: '{name}'."
        if known:
            message += f" Known tasks: {', '.join(sorted(known))}."
        super().__init__(message)
        self.name = name


class ConnectionError(OMIDemoError):
    """Raised when a session to the metadata server cannot be established."""
    pass


class AuthenticationError(ConnectionError):
    """Raised when the metadata server rejects the supplied credentials."""
    pass


class RemoteError(OMIDemoError):
    """Raised when a remote metadata call fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class FormatError(OMIDemoError):
    """Raised when a response cannot be formatted."""
    pass


class MalformedXMLError(FormatError):
    """Raised when a response is not well-formed XML."""
    pass
