"""Interactive front end that starts a monitor process and relays commands to it."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from pathlib import Path
from typing import Optional, TextIO

from treasurehunt.monitor import CMD_FILE, COMMAND_SIZE

_PACKAGE_PARENT = Path(__file__).resolve().parent.parent


class Hub:
    """Keeps track of the monitor process and handles one input line at a time."""

    def __init__(self, output: Optional[TextIO] = None, root=None) -> None:
        self.output = sys.stdout if output is None else output
        self.root = Path(".") if root is None else Path(root)
        self.process: Optional[subprocess.Popen] = None
        self.pending_stop = False
        self._read_fd: Optional[int] = None

    @property
    def monitor_running(self) -> bool:
        return self.process is not None

    def _say(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()

    def _reap(self) -> None:
        process = self.process
        if process is None or process.poll() is None:
            return
        status = process.returncode if process.returncode >= 0 else 0
        self._say(f"Monitor exited with status {status}\n")
        self.process = None
        self.pending_stop = False
        fd, self._read_fd = self._read_fd, None
        if fd is not None:
            try:
                os.close(fd)
            except OSError:
                pass

    def _child_env(self) -> dict[str, str]:
        env = dict(os.environ)
        existing = env.get("PYTHONPATH")
        env["PYTHONPATH"] = (
            f"{_PACKAGE_PARENT}{os.pathsep}{existing}" if existing else str(_PACKAGE_PARENT)
        )
        return env

    def start_monitor(self) -> None:
        """Start the monitor process unless one is already running."""
        self._reap()
        if self.monitor_running:
            self._say("Monitor already running.\n")
            return
        read_fd, write_fd = os.pipe()
        try:
            process = subprocess.Popen(
                [sys.executable, "-m", "treasurehunt.monitor", str(write_fd)],
                pass_fds=(write_fd,),
                cwd=self.root,
                env=self._child_env(),
            )
        except OSError as exc:
            os.close(read_fd)
            self._say(f"failed to start monitor: {exc.strerror}\n")
            return
        finally:
            os.close(write_fd)
        self.process = process
        self._read_fd = read_fd
        self._say(f"Monitor started (PID {process.pid})\n")

    def stop_monitor(self) -> None:
        """Ask the running monitor to exit."""
        if not self.monitor_running:
            self._say("No monitor running.\n")
            return
        self.send_command("stop")
        self.pending_stop = True
        self._say("Sent stop command to monitor. Waiting for it to exit...\n")

    def send_command(self, command: str) -> str:
        """Hand a command to the monitor and relay one chunk of its answer."""
        (self.root / CMD_FILE).write_text(command[:COMMAND_SIZE], encoding="utf-8")
        if self.process is not None:
            os.kill(self.process.pid, signal.SIGUSR1)
        fd = self._read_fd
        if fd is None:
            return ""
        try:
            data = os.read(fd, COMMAND_SIZE)
        except OSError:
            return ""
        text = data.decode("utf-8", errors="replace")
        self._say(text)
        return text

    def _ready(self) -> bool:
        if self.pending_stop:
            self._say("Monitor is shutting down. Please wait...\n")
            return False
        if not self.monitor_running:
            self._say("Monitor not running.\n")
            return False
        return True

    def handle(self, line: str) -> bool:
        """Handle one input line; return False when the hub should exit."""
        command = line.split("\n", 1)[0]
        self._reap()
        if command == "start_monitor":
            self.start_monitor()
        elif command == "stop_monitor":
            self.stop_monitor()
        elif command in ("list_hunts", "calculate_score"):
            if self._ready():
                self.send_command(command)
        elif command.startswith("list_treasures "):
            if self._ready():
                self.send_command("list_treasures " + command[len("list_treasures "):])
        elif command.startswith("view_treasure "):
            if self._ready():
                self.send_command(command)
        elif command == "exit":
            if self.monitor_running:
                self._say("Monitor still running. Use stop_monitor first.\n")
            else:
                self._say("Bye!\n")
                return False
        else:
            self._say("Unknown command.\n")
        return True

    def run(self, stdin: TextIO) -> None:
        """Prompt for and handle commands until exit or end of input."""
        has_sigchld = hasattr(signal, "SIGCHLD")
        previous = None
        if has_sigchld:
            previous = signal.signal(signal.SIGCHLD, lambda signo, frame: self._reap())
        try:
            while True:
                self._say("hub> ")
                line = stdin.readline()
                if not line or not self.handle(line):
                    break
        finally:
            if has_sigchld:
                signal.signal(signal.SIGCHLD, previous)


def main(argv=None) -> int:
    Hub(sys.stdout).run(sys.stdin)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())