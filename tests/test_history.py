# tests/test_history.py
import pytest

from myshell.history import HistoryBuffer


def test_blank_lines_are_not_recorded():
    history = HistoryBuffer()
    history.record("")
    history.record("   \t")
    assert len(history) == 0
    assert history.total == 0
    assert history.entries() == []


def test_entries_in_order_with_ordinals():
    history = HistoryBuffer()
    for cmd in ("ls", "pwd", "echo hi"):
        history.record(cmd)
    assert history.entries() == [(1, "ls"), (2, "pwd"), (3, "echo hi")]


def test_eviction_keeps_most_recent_in_order():
    """capacity + 1 lines keep exactly capacity lines, oldest dropped."""
    history = HistoryBuffer(capacity=100)
    for i in range(101):
        history.record(f"command{i}")

    entries = history.entries()
    assert len(entries) == 100
    assert [text for _, text in entries] == [f"command{i}" for i in range(1, 101)]
    assert entries[0][0] == 2
    assert entries[-1][0] == 101


def test_entries_are_restartable():
    history = HistoryBuffer(capacity=3)
    history.record("a")
    assert history.entries() == history.entries()


def test_get_steps_back_from_newest():
    history = HistoryBuffer(capacity=3)
    for cmd in ("a", "b", "c", "d"):
        history.record(cmd)
    assert history.get(1) == "d"
    assert history.get(3) == "b"
    assert history.get(4) is None
    assert history.get(0) is None


def test_show_prints_ordinals(capsys):
    history = HistoryBuffer(capacity=2)
    for cmd in ("a", "b", "c"):
        history.record(cmd)
    history.show()
    assert capsys.readouterr().out == "2\tb\n3\tc\n"


def test_clear():
    history = HistoryBuffer()
    history.record("ls")
    history.clear()
    assert len(history) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=0)
