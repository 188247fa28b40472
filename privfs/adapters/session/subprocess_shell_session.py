"""
Privileged session backed by one long-lived interactive shell process.
"""

import logging
import queue
import subprocess
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from typing_extensions import override

from privfs.exceptions import SessionUnavailableError
from privfs.ports.session.privileged_session_port import PrivilegedSessionPort


@dataclass(frozen=True)
class _Request:
    command: str
    on_line: Callable[[str], None]
    on_result: Callable[[int], None]


class SubprocessShellSession(PrivilegedSessionPort):
    """
    Runs commands in a single elevated shell (``su`` by default).

    Commands are queued and written to the shell's stdin one at a time by a
    consumer thread. After each command the thread writes an ``echo`` of a
    per-session marker followed by ``$?``; stdout lines up to the marker
    belong to that command and the number after the marker is its exit code.
    """

    def __init__(
        self,
        shell_command: Optional[list[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the session without starting it.

        Args:
            shell_command: Program and args of the shell, e.g. ['su'] or ['sudo', '-n', 'sh']
            logger: Logger instance to use for logging
        """
        self._shell_command: list[str] = list(shell_command or ["su"])
        self._logger = logger or logging.getLogger(__name__)
        self._marker = f"__privfs_{uuid.uuid4().hex}__"
        self._process: Optional[subprocess.Popen[str]] = None
        self._requests: "queue.Queue[Optional[_Request]]" = queue.Queue()
        self._idle = threading.Condition()
        self._pending = 0
        self._running = False
        self._threads: list[threading.Thread] = []

    @override
    def start(self) -> None:
        if self._running:
            return
        try:
            self._process = subprocess.Popen(
                self._shell_command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise SessionUnavailableError(
                f"Could not start privileged shell {self._shell_command}: {e}"
            )

        self._running = True
        self._threads = [
            threading.Thread(
                target=self._drain_requests, name="privfs-session", daemon=True
            ),
            threading.Thread(
                target=self._drain_stderr, name="privfs-session-stderr", daemon=True
            ),
        ]
        for thread in self._threads:
            thread.start()
        self._logger.info(f"Started privileged shell: {' '.join(self._shell_command)}")

    @override
    def close(self) -> None:
        with self._idle:
            self._running = False
            self._idle.notify_all()

        process = self._process
        if process is not None:
            try:
                if process.stdin is not None:
                    process.stdin.write("exit\n")
                    process.stdin.close()
            except (OSError, ValueError) as e:
                self._logger.debug(f"Shell stdin already closed: {e}")
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._logger.warning("Privileged shell did not exit, killing it")
                process.kill()
                process.wait()

        self._requests.put(None)
        for thread in self._threads:
            thread.join(timeout=5)
        self._logger.info("Privileged shell closed")

    @override
    def is_running(self) -> bool:
        return (
            self._running
            and self._process is not None
            and self._process.poll() is None
        )

    @override
    def add_command(
        self,
        command: str,
        on_line: Callable[[str], None],
        on_result: Callable[[int], None],
    ) -> None:
        with self._idle:
            if not self.is_running():
                raise SessionUnavailableError(
                    f"Privileged shell is not running, cannot queue '{command}'"
                )
            self._pending += 1
            self._requests.put(_Request(command, on_line, on_result))

    @override
    def wait_for_idle(self, timeout: Optional[float] = None) -> bool:
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def _drain_requests(self) -> None:
        while True:
            request = self._requests.get()
            if request is None:
                break
            try:
                if self._running:
                    self._run(request)
            except Exception as e:
                self._logger.exception(f"Command '{request.command}' failed: {e}")
                self._mark_dead(f"Session thread failed: {e}")
            finally:
                self._finish()
            if not self._running:
                break

    def _run(self, request: _Request) -> None:
        process = self._process
        assert process is not None and process.stdin is not None
        assert process.stdout is not None

        try:
            process.stdin.write(f"{request.command}\necho {self._marker} $?\n")
            process.stdin.flush()
        except (OSError, ValueError) as e:
            self._mark_dead(f"Cannot write to privileged shell: {e}")
            return

        while True:
            line = process.stdout.readline()
            if not line:
                self._mark_dead("Privileged shell closed its output")
                return
            line = line.rstrip("\r\n")
            index = line.find(self._marker)
            if index < 0:
                request.on_line(line)
                continue
            # output without a trailing newline ends up in front of the marker
            if index > 0:
                request.on_line(line[:index])
            request.on_result(self._parse_code(line[index + len(self._marker) :]))
            return

    def _parse_code(self, text: str) -> int:
        try:
            return int(text.strip())
        except ValueError:
            self._logger.warning(f"Unparseable exit code from shell: '{text}'")
            return -1

    def _finish(self) -> None:
        with self._idle:
            self._pending -= 1
            self._idle.notify_all()

    def _mark_dead(self, reason: str) -> None:
        """Stop accepting commands and drop queued ones without a result."""
        self._logger.error(reason)
        with self._idle:
            self._running = False
            while True:
                try:
                    request = self._requests.get_nowait()
                except queue.Empty:
                    break
                if request is not None:
                    self._pending -= 1
            self._idle.notify_all()

    def _drain_stderr(self) -> None:
        process = self._process
        if process is None or process.stderr is None:
            return
        for line in process.stderr:
            self._logger.debug(f"shell stderr: {line.rstrip()}")
