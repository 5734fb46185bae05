import io

import pytest

from treasurehunt.hub import Hub


@pytest.fixture
def hub(tmp_path):
    return Hub(io.StringIO(), tmp_path)


def test_unknown_command(hub):
    assert hub.handle("dance\n") is True
    assert hub.output.getvalue() == "Unknown command.\n"


def test_exit_without_monitor(hub):
    assert hub.handle("exit") is False
    assert hub.output.getvalue() == "Bye!\n"


@pytest.mark.parametrize(
    "line", ["list_hunts", "calculate_score", "list_treasures alpha", "view_treasure alpha t1"]
)
def test_commands_need_monitor(hub, line):
    assert hub.handle(line) is True
    assert hub.output.getvalue() == "Monitor not running.\n"


def test_stop_without_monitor(hub):
    hub.handle("stop_monitor")
    assert hub.output.getvalue() == "No monitor running.\n"


@pytest.mark.parametrize("line", ["list_hunts", "calculate_score", "view_treasure a b"])
def test_pending_stop_blocks_commands(hub, line):
    hub.pending_stop = True
    hub.handle(line)
    assert hub.output.getvalue() == "Monitor is shutting down. Please wait...\n"


def test_list_treasures_without_argument_is_unknown(hub):
    hub.handle("list_treasures")
    assert hub.output.getvalue() == "Unknown command.\n"


def test_run_prompts_until_exit(hub):
    hub.run(io.StringIO("dance\nexit\nlist_hunts\n"))
    assert hub.output.getvalue() == "hub> Unknown command.\nhub> Bye!\n"


def test_run_stops_at_end_of_input(hub):
    hub.run(io.StringIO("dance\n"))
    assert hub.output.getvalue() == "hub> Unknown command.\nhub> "


def test_monitor_lifecycle(hub):
    hub.start_monitor()
    try:
        assert hub.monitor_running is True
        assert hub.output.getvalue() == f"Monitor started (PID {hub.process.pid})\n"
        assert hub.handle("exit") is True
        assert "Monitor still running. Use stop_monitor first.\n" in hub.output.getvalue()
        hub.handle("start_monitor")
        assert hub.output.getvalue().endswith("Monitor already running.\n")
    finally:
        hub.process.terminate()
        hub.process.wait()
    hub.handle("list_hunts")
    assert hub.monitor_running is False
    assert hub.output.getvalue().endswith(
        "Monitor exited with status 0\nMonitor not running.\n"
    )