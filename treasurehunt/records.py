"""Fixed-size binary treasure records as stored in a hunt's treasures.dat."""

from __future__ import annotations

import os
import struct
import tempfile
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Iterable, Union

ID_SIZE = 16
USERNAME_SIZE = 32
CLUE_SIZE = 128

_LAYOUT = struct.Struct(f"<{ID_SIZE}s{USERNAME_SIZE}sff{CLUE_SIZE}si")
RECORD_SIZE = _LAYOUT.size

PathLike = Union[str, "os.PathLike[str]"]


def _encode(text: str, size: int) -> bytes:
    """Encode a string as a NUL-terminated field of the given size."""
    return text.encode("utf-8")[: size - 1]


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="ignore")


@dataclass(frozen=True)
class Treasure:
    """One treasure entry of a hunt."""

    treasure_id: str
    username: str
    latitude: float
    longitude: float
    clue: str = ""
    value: int = 0

    def pack(self) -> bytes:
        """Serialise to the fixed on-disk record layout."""
        try:
            return _LAYOUT.pack(
                _encode(self.treasure_id, ID_SIZE),
                _encode(self.username, USERNAME_SIZE),
                self.latitude,
                self.longitude,
                _encode(self.clue, CLUE_SIZE),
                self.value,
            )
        except struct.error as exc:
            raise ValueError(f"cannot pack treasure: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "Treasure":
        """Build a treasure from exactly one on-disk record."""
        if len(data) != RECORD_SIZE:
            raise ValueError(
                f"a treasure record is {RECORD_SIZE} bytes, got {len(data)}"
            )
        treasure_id, username, latitude, longitude, clue, value = _LAYOUT.unpack(data)
        return cls(
            treasure_id=_decode(treasure_id),
            username=_decode(username),
            latitude=latitude,
            longitude=longitude,
            clue=_decode(clue),
            value=value,
        )


def read_treasures(path: PathLike) -> list[Treasure]:
    """Read every complete record from a treasures file; a trailing partial record is ignored."""
    treasures = []
    with open(path, "rb") as stream:
        for chunk in iter(partial(stream.read, RECORD_SIZE), b""):
            if len(chunk) != RECORD_SIZE:
                break
            treasures.append(Treasure.unpack(chunk))
    return treasures


def append_treasure(path: PathLike, treasure: Treasure) -> None:
    """Append one record to a treasures file, creating it if needed."""
    record = treasure.pack()
    with open(path, "ab") as stream:
        stream.write(record)


def write_treasures(path: PathLike, treasures: Iterable[Treasure]) -> None:
    """Replace a treasures file with the given records."""
    target = Path(path)
    data = b"".join(treasure.pack() for treasure in treasures)
    fd, tmp_name = tempfile.mkstemp(prefix="tmp_treasures", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as stream:
            stream.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise