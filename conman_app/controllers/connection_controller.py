from pathlib import Path
from typing import List, Optional, Union

from ..connections import ConnectionRecord
from ..services.connection_service import ConnectionService
from ..session import SessionLauncher


class ConnectionController:
    """Controller coordinating connection service calls for the CLI."""

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        launcher: Optional[SessionLauncher] = None,
    ) -> None:
        self.service = ConnectionService(file_path, launcher)

    @property
    def file_path(self) -> Path:
        return self.service.file_path

    def add_connection(self, name: str, user: str, ip: str, key: str) -> ConnectionRecord:
        return self.service.add_connection(name, user, ip, key)

    def connect(self, name: str) -> None:
        self.service.connect(name)

    def list_connections(self, verbose: bool = False) -> List[str]:
        return self.service.list_connections(verbose)

    def delete_connection(self, name: str) -> int:
        return self.service.delete_connection(name)
