"""Configuration file handling and logging setup.

Settings are read from an ini file, ``~/.conman.ini`` unless another path is
given. A missing file simply yields the defaults::

    [store]
    path = ~/.conman

    [ssh]
    binary = ssh
    options = -o ServerAliveInterval=60

    [logging]
    level = WARNING
    file =
"""

import configparser
import logging
import os
import shlex
from pathlib import Path
from typing import List, Optional, Union

from .connections import default_store_path

CONFIG_FILE = ".conman.ini"
CONFIG_ENV = "CONMAN_CONFIG"
STORE_ENV = "CONMAN_FILE"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV) or Path.home() / CONFIG_FILE)


def load_config(file_path: Optional[Union[str, Path]] = None) -> configparser.ConfigParser:
    """Read the configuration file.

    Parameters
    ----------
    file_path: str | Path, optional
        Explicit configuration file. Defaults to :func:`default_config_path`.
    """
    logger = logging.getLogger(__name__)
    cfg = configparser.ConfigParser()
    path = Path(file_path) if file_path is not None else default_config_path()
    # ConfigParser.read skips files it cannot open
    if not cfg.read(path, encoding="utf-8"):
        logger.debug("Config file %s not readable; using defaults", path)
        return cfg
    logger.debug("Loaded config from %s", path)
    return cfg


def store_path_from_config(
    cfg: configparser.ConfigParser, override: Optional[Union[str, Path]] = None
) -> Path:
    """Resolve the connections file.

    An explicit ``override`` wins, then the ``CONMAN_FILE`` environment
    variable, then ``[store] path`` and finally ``~/.conman``.
    """
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(STORE_ENV)
    if env_path:
        return Path(env_path).expanduser()
    configured = cfg.get("store", "path", fallback="").strip()
    if configured:
        return Path(configured).expanduser()
    return default_store_path()


def ssh_binary_from_config(cfg: configparser.ConfigParser) -> str:
    return cfg.get("ssh", "binary", fallback="ssh").strip() or "ssh"


def ssh_options_from_config(cfg: configparser.ConfigParser) -> List[str]:
    return shlex.split(cfg.get("ssh", "options", fallback=""))


def log_level_from_config(cfg: configparser.ConfigParser) -> int:
    """Return the numeric log level, falling back to ``WARNING``."""
    name = cfg.get("logging", "level", fallback="WARNING").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        level = logging.WARNING
    return level


def setup_logging(
    level: int = logging.WARNING, log_file: Optional[Union[str, Path]] = None
) -> None:
    """Configure logging to stderr and, optionally, a log file.

    Normal command output goes to stdout via ``print`` so log records never
    mix with it.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
