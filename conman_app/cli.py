import argparse
import configparser
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from .config import (
    load_config,
    log_level_from_config,
    setup_logging,
    ssh_binary_from_config,
    ssh_options_from_config,
    store_path_from_config,
)
from .connections import split_address
from .controllers.connection_controller import ConnectionController
from .errors import ConmanError, SessionError
from .session import SessionLauncher

ADD = "add"
CONNECT = "connect"
LIST = "list"
DELETE = "delete"
HELP = "help"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


@dataclass
class Command:
    """Single action selected from the command line."""

    action: str
    name: str = ""
    address: str = ""
    key: str = ""
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conman",
        description="Save SSH connections under a name and connect to them later.",
        add_help=False,
    )
    parser.add_argument("-k", dest="key", default="", metavar="PATH", help="Path to the SSH key")
    parser.add_argument(
        "-a", dest="address", default="", metavar="USER@HOST",
        help="SSH address in the format user@ip",
    )
    parser.add_argument("-n", dest="name", default="", metavar="NAME", help="Custom name for the connection")
    parser.add_argument("-c", dest="connect", default="", metavar="NAME", help="Connect using a saved connection")
    parser.add_argument("-ls", dest="list", action="store_true", help="List saved connections")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Verbose output for listing")
    parser.add_argument("-d", dest="delete", default="", metavar="NAME", help="Delete a saved connection")
    parser.add_argument("-h", dest="help", action="store_true", help="Show this help message")
    parser.add_argument("--store", default=None, metavar="PATH", help="Connections file to use")
    parser.add_argument("--config", default=None, metavar="PATH", help="Configuration file to use")
    return parser


def select_command(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Command:
    """Turn parsed flags into exactly one :class:`Command`.

    Usage errors (an incomplete set of add flags or several actions at once)
    are reported through ``parser.error`` which exits with status 2.
    """
    add_flags = {"-k": args.key, "-a": args.address, "-n": args.name}
    given = [flag for flag, value in add_flags.items() if value]
    if given and len(given) != len(add_flags):
        missing = [flag for flag in add_flags if flag not in given]
        parser.error(f"adding a connection also requires {', '.join(missing)}")

    commands = []
    if given:
        commands.append(Command(ADD, name=args.name, address=args.address, key=args.key))
    if args.connect:
        commands.append(Command(CONNECT, name=args.connect))
    if args.list:
        commands.append(Command(LIST, verbose=args.verbose))
    if args.delete:
        commands.append(Command(DELETE, name=args.delete))
    if args.help:
        commands.append(Command(HELP))

    if len(commands) > 1:
        actions = ", ".join(c.action for c in commands)
        parser.error(f"only one action may be given at a time (got {actions})")
    return commands[0] if commands else Command(HELP)


def run(command: Command, controller: ConnectionController) -> int:
    """Execute ``command`` and return the process exit code."""
    logger = logging.getLogger(__name__)
    logger.debug("Running command %s", command)

    if command.action == ADD:
        try:
            user, ip = split_address(command.address)
        except ConmanError as exc:
            print("Error parsing address:", exc)
            return EXIT_ERROR
        try:
            controller.add_connection(command.name, user, ip, command.key)
        except ConmanError as exc:
            print("Error adding connection:", exc)
            return EXIT_ERROR
        print(command.name, "has been created and added to list")
        return EXIT_OK

    if command.action == CONNECT:
        try:
            controller.connect(command.name)
        except SessionError as exc:
            print("Error connecting:", exc)
            # Negative codes mean the client was killed by a signal
            if exc.returncode is not None and exc.returncode > 0:
                return exc.returncode
            return EXIT_ERROR
        except ConmanError as exc:
            print("Error connecting:", exc)
            return EXIT_ERROR
        return EXIT_OK

    if command.action == LIST:
        try:
            lines = controller.list_connections(command.verbose)
        except ConmanError as exc:
            print("Error loading connections:", exc)
            return EXIT_ERROR
        print("Saved entries:")
        for line in lines:
            print(line)
        return EXIT_OK

    if command.action == DELETE:
        try:
            controller.delete_connection(command.name)
        except ConmanError as exc:
            print("Error deleting connection:", exc)
            return EXIT_ERROR
        print(command.name, "has been deleted")
        return EXIT_OK

    build_parser().print_help()
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``conman`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = select_command(args, parser)

    try:
        cfg = load_config(args.config)
    except configparser.Error as exc:
        print(f"Failed to read configuration: {exc}")
        return EXIT_ERROR

    try:
        setup_logging(log_level_from_config(cfg), cfg.get("logging", "file", fallback="").strip())
    except OSError as exc:
        print(f"Failed to open log file: {exc}")
        return EXIT_ERROR
    launcher = SessionLauncher(ssh_binary_from_config(cfg), ssh_options_from_config(cfg))
    controller = ConnectionController(store_path_from_config(cfg, args.store), launcher)
    return run(command, controller)


if __name__ == "__main__":
    sys.exit(main())
