from __future__ import annotations

from carevoice.realtime.transcripts import TranscriptAccumulator


def test_full_text_is_concatenation_of_deltas() -> None:
    acc = TranscriptAccumulator()
    deltas = ["The ", "patient ", "is ", "breathless", "."]
    full = None
    for delta in deltas:
        full = acc.append("item_1", delta)
    assert full == "".join(deltas)
    assert acc.text("item_1") == "".join(deltas)


def test_finished_id_rejects_late_deltas() -> None:
    acc = TranscriptAccumulator()
    acc.append("item_1", "Hello")
    assert acc.finish("item_1") == "Hello"

    assert acc.append("item_1", " again") is None
    assert acc.open_id is None
    assert acc.append("item_2", "New") == "New"


def test_only_one_id_open_at_a_time() -> None:
    acc = TranscriptAccumulator()
    acc.append("a", "one")
    assert acc.append("b", "two") is None
    assert acc.open_id == "a"


def test_finish_twice_returns_none() -> None:
    acc = TranscriptAccumulator()
    acc.append("a", "x")
    assert acc.finish() == "x"
    assert acc.finish("a") is None


def test_reset_drops_open_buffer_but_keeps_history() -> None:
    acc = TranscriptAccumulator()
    acc.append("a", "x")
    acc.finish("a")
    acc.append("b", "partial")
    acc.reset()
    assert acc.open_id is None
    assert acc.is_finished("a")

    acc.clear()
    assert not acc.is_finished("a")
