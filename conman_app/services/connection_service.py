import logging
from pathlib import Path
from typing import List, Optional, Union

from ..connections import (
    ConnectionRecord,
    default_store_path,
    load_connections as _load_connections,
    save_connections,
)
from ..errors import ConnectionNotFoundError
from ..keys import describe_key
from ..session import SessionLauncher


class ConnectionService:
    """Service layer for saved connections.

    Every operation reads the whole connections file, works on the list in
    memory and, for changes, writes the whole list back.
    """

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        launcher: Optional[SessionLauncher] = None,
    ) -> None:
        """Create the service for a given connections file.

        Parameters
        ----------
        file_path: str | Path | None
            Connections file to operate on. When ``None`` the dotfile in the
            user's home directory is used.
        launcher: SessionLauncher | None
            Launcher used by :meth:`connect`. A default ``ssh`` launcher is
            created when omitted.
        """
        self.file_path = Path(file_path) if file_path is not None else default_store_path()
        self.launcher = launcher if launcher is not None else SessionLauncher()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("Using connections file %s", self.file_path)

    def load_connections(self) -> List[ConnectionRecord]:
        return _load_connections(self.file_path)

    def add_connection(self, name: str, user: str, ip: str, key: str) -> ConnectionRecord:
        """Append a new connection. Names are not required to be unique."""
        connections = _load_connections(self.file_path)
        record = ConnectionRecord(name=name, user=user, ip=ip, key=key)
        connections.append(record)
        save_connections(connections, self.file_path)
        self.logger.info("Connection '%s' added (%s)", name, record.address)
        return record

    def find_connection(self, name: str) -> Optional[ConnectionRecord]:
        """Return the first connection called ``name`` or ``None``."""
        connections = _load_connections(self.file_path)
        return next((c for c in connections if c.name == name), None)

    def connect(self, name: str) -> None:
        record = self.find_connection(name)
        if record is None:
            self.logger.warning("Connection '%s' not found", name)
            raise ConnectionNotFoundError("connection not found")
        self.launcher.connect(record)

    def delete_connection(self, name: str) -> int:
        """Remove every connection called ``name``.

        Returns
        -------
        int
            Number of removed connections.

        Raises
        ------
        ConnectionNotFoundError
            Nothing matched; the file is left untouched.
        """
        connections = _load_connections(self.file_path)
        remaining = []
        found = False
        for conn in connections:
            if conn.name != name:
                remaining.append(conn)
            else:
                found = True
        if not found:
            self.logger.warning("Connection '%s' not found", name)
            raise ConnectionNotFoundError(f"connection {name} not found")
        save_connections(remaining, self.file_path)
        removed = len(connections) - len(remaining)
        self.logger.info("Connection '%s' deleted (%d entries)", name, removed)
        return removed

    def list_connections(self, verbose: bool = False) -> List[str]:
        """Return display lines for all saved connections."""
        lines = []
        for conn in _load_connections(self.file_path):
            if not verbose:
                lines.append(conn.name)
                continue
            line = f"{conn.name} {conn.address} {conn.key}"
            description = describe_key(conn.key)
            if description:
                line = f"{line} ({description})"
            lines.append(line)
        return lines
