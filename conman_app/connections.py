import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import (
    AddressFormatError,
    StoreDecodeError,
    StoreReadError,
    StoreWriteError,
)

# Name of the dotfile in the user's home directory
CONNECTIONS_FILE = ".conman"
# Owner read/write only; applied when the file is created
FILE_MODE = 0o600

FIELDS = ("name", "user", "ip", "key")


@dataclass
class ConnectionRecord:
    """Single saved SSH connection."""

    name: str
    user: str
    ip: str
    key: str

    @property
    def address(self) -> str:
        return f"{self.user}@{self.ip}"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "user": self.user, "ip": self.ip, "key": self.key}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionRecord":
        """Build a record from its JSON object.

        Missing fields decode as empty strings and unknown fields are
        ignored, matching files written by older versions of the tool.
        """
        values = {}
        for field in FIELDS:
            value = data.get(field, "")
            if not isinstance(value, str):
                raise StoreDecodeError(
                    f"Field '{field}' must be a string, got {type(value).__name__}"
                )
            values[field] = value
        return cls(**values)


def default_store_path() -> Path:
    """Return the connections file in the current user's home directory."""
    return Path.home() / CONNECTIONS_FILE


def load_connections(
    file_path: Optional[Union[str, Path]] = None,
) -> List[ConnectionRecord]:
    """Load saved connections from JSON storage.

    Parameters
    ----------
    file_path: str | Path, optional
        Location of the connections file. Defaults to
        :func:`default_store_path`.

    Returns
    -------
    list[ConnectionRecord]
        Saved connections in file order. Empty when the file does not exist.
    """
    logger = logging.getLogger(__name__)
    path = Path(file_path) if file_path is not None else default_store_path()
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except FileNotFoundError:
        logger.info("Connections file %s not found", path)
        return []
    except OSError as exc:
        logger.exception("Failed to read connections file %s", path)
        raise StoreReadError(f"cannot read {path}: {exc}") from exc

    # UnicodeDecodeError is a ValueError; deep nesting exhausts the recursion limit
    try:
        data = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise StoreDecodeError(f"{path} is not valid JSON: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning("Connections file %s has invalid format", path)
        raise StoreDecodeError(f"{path} must contain a JSON array")

    connections = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise StoreDecodeError(f"Entry {index} in {path} is not an object")
        connections.append(ConnectionRecord.from_dict(item))
    logger.info("Loaded %d connections", len(connections))
    return connections


def save_connections(
    connections: List[ConnectionRecord],
    file_path: Optional[Union[str, Path]] = None,
) -> None:
    """Persist the full list of connections, replacing the file contents."""
    logger = logging.getLogger(__name__)
    path = Path(file_path) if file_path is not None else default_store_path()
    payload = [conn.to_dict() for conn in connections]
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
    except OSError as exc:
        logger.exception("Failed to save connections to %s", path)
        raise StoreWriteError(f"cannot write {path}: {exc}") from exc
    logger.info("Saved %d connections to %s", len(connections), path)


def split_address(address: str) -> Tuple[str, str]:
    """Split ``user@host`` into its user and host parts."""
    parts = address.split("@")
    if len(parts) != 2:
        raise AddressFormatError("invalid address format")
    return parts[0], parts[1]
