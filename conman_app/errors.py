"""Exceptions raised by the connection manager.

Library code raises these; only the command line front end catches them and
turns them into messages and exit codes.
"""

from typing import Optional


class ConmanError(Exception):
    """Base class for all connection manager errors."""


class StoreError(ConmanError):
    """Problem with the connections file."""


class StoreReadError(StoreError):
    """The connections file exists but could not be read."""


class StoreWriteError(StoreError):
    """The connections file could not be written."""


class StoreDecodeError(StoreError, ValueError):
    """The connections file does not contain a valid list of connections."""


class AddressFormatError(ConmanError, ValueError):
    """Address is not of the form ``user@host``."""


class ConnectionNotFoundError(ConmanError, LookupError):
    """No saved connection carries the requested name."""


class SessionError(ConmanError):
    """The SSH client could not be started or exited with an error.

    ``returncode`` is ``None`` when the process never started.
    """

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode
