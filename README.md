# treasurehunt

Keep treasure hunts on disk, look at them, and score the users who hid
the treasures.

Each hunt is a directory under the working directory. It holds two files:

- `treasures.dat`: fixed-size binary records (id, username, latitude,
  longitude, clue, value).
- `logged_hunt`: one timestamped line for each add, view and remove.

A `logged_hunt-<hunt_id>` symlink in the working directory points to each
hunt's log.

The monitor and the hub use POSIX signals (`SIGUSR1`, `SIGCHLD`), so they
run only on POSIX systems.

## Installing

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Managing hunts

```
treasure-manager --add <hunt_id>                        # prompts for each treasure field
treasure-manager --list <hunt_id>                       # file size, mtime and every treasure
treasure-manager --view <hunt_id> <treasure_id>         # full details of one treasure
treasure-manager --remove_treasure <hunt_id> <treasure_id>
treasure-manager --remove_hunt <hunt_id>
```

`--add` creates the hunt directory if it does not exist yet.
`--remove_treasure` removes every treasure with that id. `--remove_hunt`
deletes the hunt's files, its directory and its log symlink, and skips any
of them that are missing. If an operation fails, the command prints the
error to stderr and exits with status 1.

## Scores

```
calculate-score <hunt_id>
```

This prints one line per user, `User: <name>, Score: <total>`. The users
appear in the order they first occur in the hunt. Records with an empty
username are skipped, and at most 100 users are counted.

## The monitor and the hub

```
treasure-hub
```

The hub is an interactive prompt (`hub> `). It starts a monitor process
and passes commands to it:

- `start_monitor` / `stop_monitor`
- `list_hunts`: every hunt that has a `treasures.dat`, with its number of
  treasures
- `list_treasures <hunt_id>`
- `view_treasure <hunt_id> <treasure_id>`
- `calculate_score`: scores for every hunt directory
- `exit`: works only after the monitor has stopped

The hub writes each command to `hub_command.txt` in the working directory
and sends the monitor `SIGUSR1`. The monitor answers through a pipe. For
each command the hub relays one read of at most 255 bytes from that pipe.
When an answer is longer, the rest shows up after later commands. After
`stop_monitor`, the monitor waits three seconds before it exits. Until it
has exited, the hub refuses other monitor commands.

You can also run the monitor by itself:

```
treasure-monitor [<output_fd>]
```

It writes its answers to the given file descriptor, or to stdout when none
is given.

## From Python

```python
from treasurehunt.records import Treasure, read_treasures, append_treasure
from treasurehunt.score import calculate_scores, format_scores
from treasurehunt import manager

manager.add_treasure("hunt1", Treasure("t1", "alice", 45.5, 25.1, "under the oak", 10))
print(manager.list_treasures("hunt1"))
print(manager.view_treasure("hunt1", "t1"))        # None if there is no such id
print(format_scores(calculate_scores("hunt1")))
manager.remove_treasure("hunt1", "t1")             # True if anything was removed
```

The `manager` functions take an optional `root` directory, which defaults
to the working directory. When something fails they raise
`manager.HuntError`. `treasurehunt.monitor.Monitor` and
`treasurehunt.hub.Hub` take an output stream and a root directory.
`Monitor.process_command(command)` runs one command directly.
`Hub.handle(line)` handles one line of hub input.