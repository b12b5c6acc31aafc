"""
Config file I/O for CNC Gateway Config.

Reads existing config files (optionally as JSON) and writes generated config
files to the path of a ConfigTarget on the current platform.

Writes require the parent directory to exist already; it is never created.
The file is replaced as a whole (temp file + fsync + rename in the same
directory), keeping the permission bits of the file it replaces.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from cnc_gateway_config.errors import (
    ConfigParseError,
    ConfigReadError,
    ConfigWriteError,
    MissingParentDirectory,
    UnsupportedPlatformTarget,
)
from cnc_gateway_config.paths import ConfigPaths, ConfigTarget, current_platform

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644

Payload = Union[bytes, str]
Log = Union[logging.Logger, logging.LoggerAdapter]


def _fsync_dir(path: Path) -> None:
    """Ensure directory metadata is flushed so the rename is durable."""
    fd = os.open(str(path), os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def read_existing(path: Union[str, Path], parse: bool = False, *, log: Optional[Log] = None) -> Any:
    """
    Read an existing config file.

    Args:
        path: File to read.
        parse: Decode the content as JSON instead of returning raw bytes.
        log: Logger to report on; defaults to the module logger.

    Returns:
        Raw bytes, or the decoded JSON value when parse is set.

    Raises:
        ConfigReadError: If the file cannot be read.
        ConfigParseError: If parse is set and the content is not valid JSON.
    """
    log = log or logger
    path = Path(path)
    log.debug("Obtaining existing configuration from: [%s]", path)

    try:
        data = path.read_bytes()
    except OSError as exc:
        log.error("Error reading existing configuration file: [%s]", exc)
        raise ConfigReadError(f"Error reading existing configuration file {path}: {exc}") from exc

    if not parse:
        return data

    try:
        return json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.error("Error parsing existing configuration file: [%s]", exc)
        raise ConfigParseError(f"Error parsing existing configuration file {path}: {exc}") from exc


class ConfigWriter:
    """
    Writes generated config payloads to the path of a target.

    The target is resolved for the given platform (default: this process's
    platform). Nothing is touched on disk when the target is unsupported or
    the parent directory is missing.
    """

    def __init__(
        self,
        paths: ConfigPaths,
        platform: Optional[str] = None,
        *,
        log: Optional[Log] = None,
    ) -> None:
        self.paths = paths
        self.platform = platform or current_platform()
        self._logger = log or logger

    def ensure_config(self, target: Union[ConfigTarget, str]) -> Path:
        """
        Resolve target to a path whose parent directory exists.

        Raises:
            UnsupportedPlatformTarget: If target has no path on this platform.
            MissingParentDirectory: If the parent directory does not exist.
        """
        path = self.paths.resolve(target, self.platform, log=self._logger)
        if path is None:
            raise UnsupportedPlatformTarget("Config file is not applicable on current platform")

        parent = path.parent
        try:
            is_dir = stat.S_ISDIR(parent.stat().st_mode)
        except OSError as exc:
            self._logger.error("Unable to find directory: [%s]: %s", parent, exc)
            raise MissingParentDirectory(f"Unable to find directory: [{parent}]") from exc

        if not is_dir:
            self._logger.error("Unable to find directory: [%s]: not a directory", parent)
            raise MissingParentDirectory(f"Unable to find directory: [{parent}]")

        self._logger.debug("Parent directory for file exists: [%s]", path)
        return path

    def write_config(self, target: Union[ConfigTarget, str], payload: Payload) -> Path:
        """
        Write payload to the file of target, replacing its content.

        Args:
            target: Config target to write.
            payload: File content; str is encoded as UTF-8.

        Returns:
            The path that was written.

        Raises:
            UnsupportedPlatformTarget, MissingParentDirectory: Before any write.
            ConfigWriteError: If the write itself fails.
        """
        path = self.ensure_config(target)
        data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)

        self._logger.debug("Writing config data to file: [%s]", path)
        try:
            self._write_file(path, data)
        except OSError as exc:
            self._logger.error("Error writing to file: [%s]: %s", path, exc)
            raise ConfigWriteError(f"Error writing to file {path}: {exc}") from exc

        self._logger.info("Config file written successfully: [%s]", path)
        self._logger.debug("Config data: [%s]", data.decode("utf-8", errors="replace"))
        return path

    def _write_file(self, path: Path, data: bytes) -> None:
        try:
            mode = stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            mode = DEFAULT_FILE_MODE

        with tempfile.NamedTemporaryFile(
            mode="wb",
            delete=False,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tf:
            tmp_path = Path(tf.name)
            try:
                tf.write(data)
                tf.flush()
                os.fsync(tf.fileno())
            except OSError:
                tf.close()
                tmp_path.unlink(missing_ok=True)
                raise

        try:
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        # the file is already replaced at this point
        try:
            _fsync_dir(path.parent)
        except OSError as exc:
            self._logger.warning("Unable to sync directory: [%s]: %s", path.parent, exc)
