"""Create, inspect and remove treasures and hunts on disk."""

from __future__ import annotations

import contextlib
import os
import re
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from treasurehunt.records import (
    CLUE_SIZE,
    ID_SIZE,
    USERNAME_SIZE,
    Treasure,
    append_treasure,
    read_treasures,
    write_treasures,
)

DATA_FILE = "treasures.dat"
LOG_FILE = "logged_hunt"

_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT = re.compile(r"[+-]?\d+")
_WORD = re.compile(r"\S+")


class HuntError(Exception):
    """A hunt operation could not be carried out."""


def _root(root) -> Path:
    return Path(".") if root is None else Path(root)


def hunt_path(hunt_id: str, filename: str, root=None) -> Path:
    """Path of a file inside a hunt directory."""
    return _root(root) / hunt_id / filename


def log_operation(hunt_id: str, message: str, root=None) -> None:
    """Append a timestamped line to the hunt log and link it from the root."""
    stamp = datetime.now().strftime("[%Y-%m-%d %H:%M:%S]")
    try:
        with open(hunt_path(hunt_id, LOG_FILE, root), "a", encoding="utf-8") as log:
            log.write(f"{stamp} {message}\n")
    except OSError as exc:
        raise HuntError(f"cannot open log file: {exc.strerror}") from exc
    link = _root(root) / f"logged_hunt-{hunt_id}"
    if not link.exists():
        with contextlib.suppress(OSError):
            os.symlink(f"./{hunt_id}/{LOG_FILE}", link)


class _Scanner:
    """Reads whitespace-separated fields and lines the way formatted input does."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._buf = ""

    def _fill(self) -> bool:
        if not self._buf:
            self._buf = self._stream.readline()
        return bool(self._buf)

    def _skip_space(self) -> None:
        while True:
            if not self._fill():
                raise HuntError("unexpected end of input")
            self._buf = self._buf.lstrip()
            if self._buf:
                return

    def word(self, limit: int) -> str:
        self._skip_space()
        text = _WORD.match(self._buf).group()[:limit]
        self._buf = self._buf[len(text):]
        return text

    def number(self, pattern: re.Pattern, convert, what: str):
        self._skip_space()
        match = pattern.match(self._buf)
        if not match:
            raise HuntError(f"invalid {what}")
        self._buf = self._buf[match.end():]
        return convert(match.group())

    def getchar(self) -> str:
        if not self._fill():
            return ""
        char, self._buf = self._buf[0], self._buf[1:]
        return char

    def line(self, size: int) -> str:
        if not self._fill():
            return ""
        end = self._buf.find("\n")
        end = len(self._buf) if end < 0 else end + 1
        end = min(end, size - 1)
        text, self._buf = self._buf[:end], self._buf[end:]
        return text


def prompt_treasure(stdin: TextIO, stdout: TextIO) -> Treasure:
    """Ask for the fields of a new treasure interactively."""
    scanner = _Scanner(stdin)

    def ask(prompt: str) -> None:
        stdout.write(prompt)
        stdout.flush()

    ask("Enter Treasure ID: ")
    treasure_id = scanner.word(ID_SIZE - 1)
    ask("Enter Username: ")
    username = scanner.word(USERNAME_SIZE - 1)
    ask("Enter Latitude: ")
    latitude = scanner.number(_FLOAT, float, "latitude")
    ask("Enter Longitude: ")
    longitude = scanner.number(_FLOAT, float, "longitude")
    ask("Enter Clue: ")
    scanner.getchar()
    clue = scanner.line(CLUE_SIZE).split("\n", 1)[0]
    ask("Enter Value: ")
    value = scanner.number(_INT, int, "value")
    return Treasure(treasure_id, username, latitude, longitude, clue, value)


def _read(hunt_id: str, root) -> list[Treasure]:
    try:
        return read_treasures(hunt_path(hunt_id, DATA_FILE, root))
    except OSError as exc:
        raise HuntError(f"cannot open treasure file: {exc.strerror}") from exc


def add_treasure(hunt_id: str, treasure: Treasure, root=None) -> None:
    """Store a treasure in a hunt, creating the hunt if needed."""
    try:
        (_root(root) / hunt_id).mkdir(mode=0o755, exist_ok=True)
        append_treasure(hunt_path(hunt_id, DATA_FILE, root), treasure)
    except OSError as exc:
        raise HuntError(f"cannot open treasure file: {exc.strerror}") from exc
    log_operation(
        hunt_id, f"Added treasure {treasure.treasure_id} by user {treasure.username}", root
    )


def _summary_line(t: Treasure) -> str:
    return (
        f"ID: {t.treasure_id} | User: {t.username} | Lat: {t.latitude:.2f} "
        f"| Lon: {t.longitude:.2f} | Value: {t.value}\n"
    )


def list_treasures(hunt_id: str, root=None) -> str:
    """Describe a hunt's file and list its treasures."""
    path = hunt_path(hunt_id, DATA_FILE, root)
    try:
        info = path.stat()
    except OSError as exc:
        raise HuntError(f"cannot stat treasure file: {exc.strerror}") from exc
    treasures = _read(hunt_id, root)
    header = (
        f"Hunt: {hunt_id}\n"
        f"File size: {info.st_size} bytes\n"
        f"Last modified: {time.ctime(info.st_mtime)}\n"
        "\nTreasure List:\n"
    )
    return header + "".join(_summary_line(t) for t in treasures)


def view_treasure(hunt_id: str, treasure_id: str, root=None) -> Optional[str]:
    """Details of one treasure, or None when the hunt has no such treasure."""
    for t in _read(hunt_id, root):
        if t.treasure_id == treasure_id:
            details = (
                "Treasure Details:\n"
                f"ID: {t.treasure_id}\nUser: {t.username}\n"
                f"Lat: {t.latitude:.2f}\nLon: {t.longitude:.2f}\n"
                f"Clue: {t.clue}\nValue: {t.value}\n"
            )
            log_operation(hunt_id, f"Viewed treasure {t.treasure_id}", root)
            return details
    return None


def remove_treasure(hunt_id: str, treasure_id: str, root=None) -> bool:
    """Remove every treasure with the given id; report whether any was found."""
    treasures = _read(hunt_id, root)
    kept = [t for t in treasures if t.treasure_id != treasure_id]
    if len(kept) == len(treasures):
        return False
    try:
        write_treasures(hunt_path(hunt_id, DATA_FILE, root), kept)
    except OSError as exc:
        raise HuntError(f"cannot rewrite treasure file: {exc.strerror}") from exc
    log_operation(hunt_id, f"Removed treasure {treasure_id}", root)
    return True


def remove_hunt(hunt_id: str, root=None) -> None:
    """Delete a hunt's files, its directory and its log link, ignoring what is missing."""
    base = _root(root)
    with contextlib.suppress(OSError):
        hunt_path(hunt_id, DATA_FILE, root).unlink()
    with contextlib.suppress(OSError):
        hunt_path(hunt_id, LOG_FILE, root).unlink()
    with contextlib.suppress(OSError):
        (base / hunt_id).rmdir()
    with contextlib.suppress(OSError):
        (base / f"logged_hunt-{hunt_id}").unlink()


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print(
            "invalid arguments\nUsage: treasure_manager --<command> <hunt_id> [<id>]",
            file=sys.stderr,
        )
        return 1
    command, hunt_id, *rest = args
    try:
        if command == "--add":
            add_treasure(hunt_id, prompt_treasure(sys.stdin, sys.stdout))
        elif command == "--list":
            sys.stdout.write(list_treasures(hunt_id))
        elif command == "--view" and len(rest) == 1:
            details = view_treasure(hunt_id, rest[0])
            sys.stdout.write(
                details if details is not None else f"Treasure ID '{rest[0]}' not found.\n"
            )
        elif command == "--remove_treasure" and len(rest) == 1:
            found = remove_treasure(hunt_id, rest[0])
            print("Treasure removed." if found else "Treasure not found.")
        elif command == "--remove_hunt":
            remove_hunt(hunt_id)
            print(f"Hunt '{hunt_id}' removed.")
        else:
            print("invalid operation", file=sys.stderr)
            return 1
    except HuntError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())