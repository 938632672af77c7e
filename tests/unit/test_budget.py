from __future__ import annotations

from carevoice.state import Message, Role
from carevoice.session.budget import TokenBudgetMonitor, render_transcript


class _WordEncoder:
    def encode(self, text: str) -> list[str]:
        return text.split()


def test_render_transcript_joins_role_lines() -> None:
    messages = [Message(Role.USER, "hello"), Message(Role.ASSISTANT, "hi")]
    assert render_transcript("You are a nurse", messages) == "You are a nurse\n\nuser: hello\nassistant: hi"


def test_small_conversation_stays_under_ceiling() -> None:
    monitor = TokenBudgetMonitor(context_limit=32_000, encoder=_WordEncoder())
    messages = [Message(Role.USER, "hello"), Message(Role.ASSISTANT, "hi")]

    assert monitor.update("You are a nurse", messages) is False
    assert monitor.ceiling == 28_800
    assert monitor.token_count == 8
    assert monitor.limit_reached is False


def test_crossing_is_edge_triggered_and_one_way() -> None:
    monitor = TokenBudgetMonitor(context_limit=10, encoder=_WordEncoder())
    assert monitor.ceiling == 9

    messages = [Message(Role.USER, "one two three")]
    assert monitor.update("a b", messages) is False

    messages.append(Message(Role.ASSISTANT, "four five six seven"))
    assert monitor.update("a b", messages) is True
    assert monitor.limit_reached

    messages.append(Message(Role.USER, "more words keep coming"))
    assert monitor.update("a b", messages) is False
    assert monitor.limit_reached
    # Even if the count drops, the limit stays reached.
    assert monitor.update("", []) is False
    assert monitor.limit_reached


def test_usage_percentage_is_capped() -> None:
    monitor = TokenBudgetMonitor(context_limit=10, encoder=_WordEncoder())
    monitor.update(" ".join(["w"] * 50), [])
    assert monitor.usage_percentage == 100.0


def test_default_limit_comes_from_realtime_model() -> None:
    monitor = TokenBudgetMonitor(encoder=_WordEncoder())
    assert monitor.ceiling == 28_800


def test_default_encoder_counts_cl100k_tokens() -> None:
    monitor = TokenBudgetMonitor(context_limit=32_000)
    messages = [Message(Role.USER, "hello"), Message(Role.ASSISTANT, "hi")]

    assert monitor.update("You are a nurse", messages) is False
    # "You| are| a| nurse|\n\n|user|:| hello|\n|assistant|:| hi"
    assert monitor.token_count == 12
    assert monitor.ceiling == 28_800
    assert monitor.limit_reached is False
    assert monitor.usage_percentage == 12 / 28_800 * 100.0
