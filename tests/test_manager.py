import io
import os
import re

import pytest

from treasurehunt.manager import (
    HuntError,
    add_treasure,
    hunt_path,
    list_treasures,
    log_operation,
    main,
    prompt_treasure,
    remove_hunt,
    remove_treasure,
    view_treasure,
)
from treasurehunt.records import RECORD_SIZE, Treasure, read_treasures

ALICE = Treasure("t1", "alice", 45.5, 25.25, "under the old oak", 10)
BOB = Treasure("t2", "bob", 1.5, 2.75, "by the river", 3)


@pytest.fixture
def hunt(tmp_path):
    add_treasure("h1", ALICE, tmp_path)
    add_treasure("h1", BOB, tmp_path)
    return tmp_path


def log_lines(root):
    return (root / "h1" / "logged_hunt").read_text().splitlines()


def test_hunt_path(tmp_path):
    assert hunt_path("h1", "treasures.dat", tmp_path) == tmp_path / "h1" / "treasures.dat"


def test_add_stores_records_and_logs(hunt):
    assert read_treasures(hunt / "h1" / "treasures.dat") == [ALICE, BOB]
    assert re.fullmatch(
        r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] Added treasure t1 by user alice",
        log_lines(hunt)[0],
    )
    assert os.readlink(hunt / "logged_hunt-h1") == "./h1/logged_hunt"


def test_log_operation_without_hunt_dir(tmp_path):
    with pytest.raises(HuntError):
        log_operation("missing", "hello", tmp_path)


def test_list_treasures(hunt):
    text = list_treasures("h1", hunt)
    assert text.startswith("Hunt: h1\n")
    assert f"File size: {2 * RECORD_SIZE} bytes\n" in text
    assert "\nTreasure List:\n" in text
    assert text.endswith(
        "ID: t1 | User: alice | Lat: 45.50 | Lon: 25.25 | Value: 10\n"
        "ID: t2 | User: bob | Lat: 1.50 | Lon: 2.75 | Value: 3\n"
    )


def test_list_missing_hunt(tmp_path):
    with pytest.raises(HuntError):
        list_treasures("nope", tmp_path)


def test_view_treasure_found(hunt):
    details = view_treasure("h1", "t2", hunt)
    assert details == (
        "Treasure Details:\nID: t2\nUser: bob\nLat: 1.50\nLon: 2.75\n"
        "Clue: by the river\nValue: 3\n"
    )
    assert log_lines(hunt)[-1].endswith("Viewed treasure t2")


def test_view_treasure_not_found(hunt):
    assert view_treasure("h1", "zzz", hunt) is None
    assert len(log_lines(hunt)) == 2


def test_view_missing_hunt(tmp_path):
    with pytest.raises(HuntError):
        view_treasure("nope", "t1", tmp_path)


def test_remove_treasure(hunt):
    assert remove_treasure("h1", "t1", hunt) is True
    assert read_treasures(hunt / "h1" / "treasures.dat") == [BOB]
    assert log_lines(hunt)[-1].endswith("Removed treasure t1")
    assert remove_treasure("h1", "t1", hunt) is False


def test_remove_hunt(hunt):
    remove_hunt("h1", hunt)
    assert not (hunt / "h1").exists()
    assert not os.path.lexists(hunt / "logged_hunt-h1")


def test_prompt_treasure():
    out = io.StringIO()
    treasure = prompt_treasure(
        io.StringIO("t1 alice\n45.5\n25.25\nunder the old oak\n10\n"), out
    )
    assert treasure == ALICE
    assert out.getvalue().startswith("Enter Treasure ID: Enter Username: ")


def test_prompt_truncates_like_field_width():
    treasure = prompt_treasure(
        io.StringIO("abcdefghijklmnopqrs\n1.5\n2\nclue\n4\n"), io.StringIO()
    )
    assert treasure.treasure_id == "abcdefghijklmno"
    assert treasure.username == "pqrs"
    assert treasure.latitude == 1.5


def test_prompt_invalid_latitude():
    with pytest.raises(HuntError):
        prompt_treasure(io.StringIO("t1 alice\nnorth\n"), io.StringIO())


def test_main_argument_errors(capsys):
    assert main(["--list"]) == 1
    assert main(["--bogus", "h1"]) == 1
    assert main(["--view", "h1"]) == 1
    assert "invalid operation" in capsys.readouterr().err


def test_main_add_list_remove(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("t9 dave\n3\n4\nclue text\n7\n"))
    assert main(["--add", "h2"]) == 0
    assert main(["--list", "h2"]) == 0
    assert "ID: t9 | User: dave" in capsys.readouterr().out
    assert main(["--view", "h2", "none"]) == 0
    assert capsys.readouterr().out == "Treasure ID 'none' not found.\n"
    assert main(["--remove_treasure", "h2", "t9"]) == 0
    assert capsys.readouterr().out == "Treasure removed.\n"
    assert main(["--remove_hunt", "h2"]) == 0
    assert capsys.readouterr().out == "Hunt 'h2' removed.\n"
    assert not (tmp_path / "h2").exists()