"""Total treasure values per user for one hunt."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Mapping

from treasurehunt.records import read_treasures

MAX_USERS = 100


def calculate_scores(hunt_dir) -> dict[str, int]:
    """Sum treasure values per user, in first-seen order, for at most MAX_USERS users."""
    scores: dict[str, int] = {}
    for treasure in read_treasures(Path(hunt_dir) / "treasures.dat"):
        if not treasure.username:
            continue
        if treasure.username in scores:
            scores[treasure.username] += treasure.value
        elif len(scores) < MAX_USERS:
            scores[treasure.username] = treasure.value
    return scores


def format_scores(scores: Mapping[str, int]) -> str:
    """Render scores one user per line."""
    return "".join(f"User: {user}, Score: {score}\n" for user, score in scores.items())


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: calculate_score <hunt_id>")
        return 1
    try:
        scores = calculate_scores(args[0])
    except OSError as exc:
        print(f"Failed to open treasures.dat: {exc.strerror}", file=sys.stderr)
        return 1
    sys.stdout.write(format_scores(scores))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())