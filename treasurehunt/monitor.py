"""Background worker that answers hub commands about the hunts on disk."""

from __future__ import annotations

import os
import signal
import sys
import time
from pathlib import Path
from typing import TextIO

from treasurehunt.manager import DATA_FILE, HuntError, list_treasures, view_treasure
from treasurehunt.records import RECORD_SIZE
from treasurehunt.score import calculate_scores, format_scores

CMD_FILE = "hub_command.txt"
COMMAND_SIZE = 255


class Monitor:
    """Carries out one command at a time and writes the answer to an output stream."""

    STOP_DELAY = 3.0

    def __init__(self, output: TextIO, root=None) -> None:
        self.output = output
        self.root = Path(".") if root is None else Path(root)

    def _hunt_dirs(self) -> list[str]:
        with os.scandir(self.root) as entries:
            return sorted(
                entry.name for entry in entries if entry.is_dir(follow_symlinks=False)
            )

    def list_hunts(self) -> None:
        """Write each hunt that has a treasure file, with its number of treasures."""
        try:
            names = self._hunt_dirs()
        except OSError:
            self.output.write("Cannot open current directory\n")
            return
        for name in names:
            try:
                size = (self.root / name / DATA_FILE).stat().st_size
            except OSError:
                continue
            self.output.write(f"Hunt: {name} | Treasures: {size // RECORD_SIZE}\n")

    def calculate_score(self) -> None:
        """Write the per-user scores of every hunt."""
        try:
            names = self._hunt_dirs()
        except OSError:
            self.output.write("Cannot open hunts directory\n")
            return
        for name in names:
            self.output.write(f"Hunt: {name}\n")
            try:
                scores = calculate_scores(self.root / name)
            except OSError as exc:
                print(f"Failed to open treasures.dat: {exc.strerror}", file=sys.stderr)
                continue
            self.output.write(format_scores(scores))

    def _list_treasures(self, argument: str) -> None:
        tokens = argument.split()
        if not tokens:
            self.output.write("Invalid format. Use: list_treasures hunt_id\n")
            return
        try:
            self.output.write(list_treasures(tokens[0], self.root))
        except HuntError as exc:
            print(exc, file=sys.stderr)

    def _view_treasure(self, argument: str) -> None:
        tokens = argument.split()
        if len(tokens) < 2:
            self.output.write(
                "Invalid format. Use: view_treasure hunt_id treasure_id\n"
            )
            return
        hunt_id, treasure_id = tokens[:2]
        try:
            details = view_treasure(hunt_id, treasure_id, self.root)
        except HuntError as exc:
            print(exc, file=sys.stderr)
            return
        self.output.write(
            details if details is not None else f"Treasure ID '{treasure_id}' not found.\n"
        )

    def process_command(self, command: str) -> bool:
        """Carry out one command; return False when the monitor is told to stop."""
        keep_running = True
        if command == "stop":
            self.output.write(
                "Monitor: received stop command, exiting in 3 seconds...\n"
            )
            keep_running = False
        elif command == "list_hunts":
            self.list_hunts()
        elif command.startswith("list_treasures "):
            self._list_treasures(command[len("list_treasures "):])
        elif command.startswith("view_treasure "):
            self._view_treasure(command[len("view_treasure "):])
        elif command == "calculate_score":
            self.calculate_score()
        else:
            self.output.write(f"Monitor: Unknown command: {command}\n")
        self.output.flush()
        return keep_running

    def _read_command(self) -> str:
        with open(self.root / CMD_FILE, "rb") as stream:
            return stream.read(COMMAND_SIZE).decode("utf-8", errors="replace")

    def run(self) -> None:
        """Wait for SIGUSR1, read the command file and answer, until told to stop."""
        signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGUSR1})
        print("Monitor started. Waiting for commands...", flush=True)
        while True:
            signal.sigwait({signal.SIGUSR1})
            try:
                command = self._read_command()
            except OSError:
                self.output.write("Cannot read command file\n")
                self.output.flush()
                continue
            if not self.process_command(command):
                time.sleep(self.STOP_DELAY)
                return


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGUSR1})
    if args:
        try:
            fd = int(args[0])
        except ValueError:
            print("Usage: treasure_monitor [<output_fd>]", file=sys.stderr)
            return 1
        output = os.fdopen(fd, "w", encoding="utf-8")
    else:
        output = sys.stdout
    Monitor(output).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())