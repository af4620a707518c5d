"""Hand the terminal over to the system SSH client."""

import logging
import subprocess
from typing import Callable, List, Optional, Sequence

from .connections import ConnectionRecord
from .errors import SessionError


class SessionLauncher:
    """Start an interactive ``ssh`` session for a saved connection.

    Parameters
    ----------
    ssh_binary: str
        Name or path of the SSH client executable.
    ssh_options: sequence of str, optional
        Extra arguments placed before the key and target.
    runner: callable
        Function used to run the command. Defaults to :func:`subprocess.run`;
        tests substitute a fake.
    """

    def __init__(
        self,
        ssh_binary: str = "ssh",
        ssh_options: Optional[Sequence[str]] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.ssh_binary = ssh_binary
        self.ssh_options = list(ssh_options or [])
        self.runner = runner
        self.logger = logging.getLogger(__name__)

    def build_command(self, record: ConnectionRecord) -> List[str]:
        # "--" keeps a user name starting with "-" from being read as an option
        return [self.ssh_binary, *self.ssh_options, "-i", record.key, "--", record.address]

    def connect(self, record: ConnectionRecord) -> None:
        """Run the SSH client attached to this terminal and wait for it.

        Standard streams are inherited so the user talks to the remote shell
        directly. There is no timeout; the call returns when ``ssh`` exits.
        """
        command = self.build_command(record)
        self.logger.info("Connecting to '%s' (%s)", record.name, record.address)
        self.logger.debug("Running %s", command)
        try:
            result = self.runner(command, check=False)
        except OSError as exc:
            self.logger.error("Failed to start %s: %s", self.ssh_binary, exc)
            raise SessionError(f"failed to start {self.ssh_binary}: {exc}") from exc
        if result.returncode != 0:
            self.logger.warning(
                "Session '%s' exited with status %d", record.name, result.returncode
            )
            raise SessionError(
                f"exit status {result.returncode}", returncode=result.returncode
            )
        self.logger.info("Session '%s' closed", record.name)
