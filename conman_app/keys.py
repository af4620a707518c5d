"""Helpers for describing private keys referenced by saved connections."""

import logging
from pathlib import Path
from typing import Optional, Union

import paramiko


def _key_types():
    key_types = [paramiko.RSAKey]
    if hasattr(paramiko, "ECDSAKey"):
        key_types.append(paramiko.ECDSAKey)
    if hasattr(paramiko, "Ed25519Key"):
        key_types.append(paramiko.Ed25519Key)
    return key_types


def read_private_key(key_path: Union[str, Path]) -> Optional[paramiko.PKey]:
    """Load an unencrypted private key, trying the common key types in turn.

    Returns ``None`` when the file is missing, encrypted or not a key that
    paramiko understands.
    """
    logger = logging.getLogger(__name__)
    path = Path(key_path).expanduser()
    if not path.is_file():
        logger.debug("Key file %s not found", path)
        return None
    for pkey_cls in _key_types():
        try:
            logger.debug("Attempting to load %s using %s", path, pkey_cls.__name__)
            return pkey_cls.from_private_key_file(str(path))
        except paramiko.PasswordRequiredException:
            logger.debug("Key %s is encrypted", path)
            return None
        except (paramiko.SSHException, OSError, ValueError) as exc:
            logger.debug("Failed loading %s as %s: %s", path, pkey_cls.__name__, exc)
    return None


def describe_key(key_path: Union[str, Path]) -> Optional[str]:
    """Return ``"<type> <SHA256 fingerprint>"`` for a key, or ``None``."""
    key = read_private_key(key_path)
    if key is None:
        return None
    return f"{key.get_name()} {key.fingerprint}"
