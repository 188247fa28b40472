"""
Byte streams that relax a path's mode bits for their lifetime.

The process doing the raw read/write is not necessarily privileged, so
before opening, the path is opened up with ``chmod 0777`` through the
privileged session and the previously recorded mode is put back when the
stream is closed.
"""

import io
import logging
import re
import threading
import weakref
from typing import Callable, Optional

from privfs.ports.session.command_channel_port import CommandChannelPort
from privfs.utils.paths import quote

_MODE_RE = re.compile(r"^[0-7]{3,4}$")


class _Relaxation:
    """Original mode of a relaxed path and how many streams still hold it."""

    def __init__(self, mode: str):
        self.mode = mode
        self.holders = 1


# paths currently opened up, per channel; a path is relaxed by its first
# stream and restored by its last
_relaxed_lock = threading.Lock()
_relaxed: "weakref.WeakKeyDictionary[CommandChannelPort, dict[str, _Relaxation]]" = (
    weakref.WeakKeyDictionary()
)


class PermissionGuard:
    """Records the mode of one path, opens it up, and restores it once.

    Guards on the same channel and path share one relaxation: only the
    first records the mode and runs ``chmod 0777``, and only the last to
    restore puts the recorded mode back.
    """

    def __init__(
        self,
        channel: CommandChannelPort,
        path: str,
        logger: Optional[logging.Logger] = None,
    ):
        self._channel = channel
        self._path = path
        self._logger = logger or logging.getLogger(__name__)
        self._mode: Optional[str] = None
        self._holding = False
        self._restored = False

    @property
    def recorded_mode(self) -> Optional[str]:
        return self._mode

    def relax(self) -> None:
        """
        Record the current mode and set the path to 0777.

        When the path is already relaxed by another guard, the mode that
        guard recorded is reused and no command is run. When the recorded
        mode is not an octal mode the path is left alone, as it could not
        be put back afterwards.
        """
        with _relaxed_lock:
            paths = _relaxed.setdefault(self._channel, {})
            held = paths.get(self._path)
            if held is not None:
                held.holders += 1
                self._mode = held.mode
                self._holding = True
                return

            mode = self._channel.run_for_output(f"stat -c %a {quote(self._path)}").strip()
            if not _MODE_RE.match(mode):
                self._logger.warning(
                    f"Cannot read mode of {self._path} (got '{mode}'), leaving permissions unchanged"
                )
                return

            self._mode = mode
            paths[self._path] = _Relaxation(mode)
            self._holding = True
            if not self._channel.run_for_status(f"chmod 0777 {quote(self._path)}"):
                self._logger.warning(f"Could not relax permissions of {self._path}")

    def restore(self) -> None:
        """Release this guard's hold; the last holder puts back the recorded mode."""
        if self._restored:
            return
        self._restored = True
        if not self._holding:
            return
        with _relaxed_lock:
            paths = _relaxed.get(self._channel, {})
            held = paths.get(self._path)
            if held is None:
                return
            held.holders -= 1
            if held.holders > 0:
                self._logger.debug(
                    f"{self._path} still open by {held.holders} stream(s), keeping 0777"
                )
                return
            del paths[self._path]
            if not self._channel.run_for_status(f"chmod 0{held.mode} {quote(self._path)}"):
                self._logger.warning(
                    f"Could not restore mode 0{held.mode} of {self._path}"
                )


class PermissionRestoringFileIO(io.FileIO):
    """Raw file stream that runs a restore action after it is closed."""

    def __init__(self, path: str, mode: str, on_close: Callable[[], None]):
        # set before FileIO.__init__ so a failed open still has them for __del__
        self._on_close = on_close
        self._close_handled = False
        super().__init__(path, mode)

    def close(self) -> None:
        if self._close_handled:
            super().close()
            return
        self._close_handled = True
        try:
            super().close()
        finally:
            self._on_close()


def _open_guarded(
    guard: PermissionGuard, path: str, mode: str
) -> PermissionRestoringFileIO:
    guard.relax()
    try:
        return PermissionRestoringFileIO(path, mode, guard.restore)
    except BaseException:
        guard.restore()
        raise


def open_output_stream(
    channel: CommandChannelPort,
    target_path: str,
    permission_path: str,
    logger: Optional[logging.Logger] = None,
) -> PermissionRestoringFileIO:
    """
    Open target_path for writing from the start, creating or truncating it.

    Args:
        channel: Channel used for the stat/chmod commands
        target_path: File to write
        permission_path: Path whose mode is relaxed: the file itself when it
            exists, otherwise its parent directory
        logger: Logger instance to use for logging

    Returns:
        A writable raw stream; closing it restores the mode of permission_path
    """
    guard = PermissionGuard(channel, permission_path, logger)
    return _open_guarded(guard, target_path, "wb")


def open_input_stream(
    channel: CommandChannelPort,
    path: str,
    logger: Optional[logging.Logger] = None,
) -> PermissionRestoringFileIO:
    """
    Open path for reading from the start.

    Returns:
        A readable raw stream; closing it restores the mode of path
    """
    guard = PermissionGuard(channel, path, logger)
    return _open_guarded(guard, path, "rb")
