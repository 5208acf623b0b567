"""Tests for the aiogram message handler reply contract.

Every incoming message must produce exactly one text reply. Store failures must be answered with a
generic apology, never with exception details.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from src.bot.handlers import SEND_TRANSCRIPT, SOMETHING_WENT_WRONG, handle_message
from src.goals.memory import MemoryGoalStore
from src.intent.composer import HELP_TEXT, NOT_UNDERSTOOD


class _FakeMessage:
    def __init__(
            self,
            text: str | None,
            *,
            user_id: int | None = 7,
            chat_id: int = 100,
            voice: object | None = None,
    ) -> None:
        self.text = text
        self.caption = None
        self.voice = voice
        self.audio = None
        self.from_user = None if user_id is None else SimpleNamespace(id=user_id)
        self.chat = SimpleNamespace(id=chat_id)
        self.answers: list[str] = []

    async def answer(self, text: str) -> None:
        """Record the outgoing bot reply (aiogram's `Message.answer` substitute)."""
        self.answers.append(text)


def _make_app(store: Any | None = None) -> Any:
    return SimpleNamespace(
        settings=SimpleNamespace(store_backend="memory"),
        store=store or MemoryGoalStore(),
        pool=None,
    )


@pytest.mark.asyncio
async def test_handler_asks_to_rephrase_empty_text() -> None:
    message = _FakeMessage(text=None)

    await handle_message(message, _make_app())  # type: ignore[arg-type]

    assert message.answers == [NOT_UNDERSTOOD]


@pytest.mark.asyncio
async def test_handler_asks_for_transcript_of_voice_note() -> None:
    message = _FakeMessage(text=None, voice=object())

    await handle_message(message, _make_app())  # type: ignore[arg-type]

    assert message.answers == [SEND_TRANSCRIPT]


@pytest.mark.parametrize("command", ["/start", "/help", "/help@GoalsBot"])
@pytest.mark.asyncio
async def test_handler_start_and_help_commands(command: str) -> None:
    message = _FakeMessage(text=command)

    await handle_message(message, _make_app())  # type: ignore[arg-type]

    assert message.answers == [HELP_TEXT]


@pytest.mark.asyncio
async def test_handler_unknown_command() -> None:
    message = _FakeMessage(text="/settings")

    await handle_message(message, _make_app())  # type: ignore[arg-type]

    assert message.answers == [NOT_UNDERSTOOD]


@pytest.mark.asyncio
async def test_handler_runs_commands_per_user() -> None:
    app = _make_app()

    await handle_message(_FakeMessage('add task "Buy groceries"', user_id=1), app)  # type: ignore[arg-type]
    mine = _FakeMessage("show my tasks", user_id=1)
    theirs = _FakeMessage("show my tasks", user_id=2)
    await handle_message(mine, app)  # type: ignore[arg-type]
    await handle_message(theirs, app)  # type: ignore[arg-type]

    assert mine.answers == ["Here are your tasks.\n[ ] Buy groceries"]
    assert theirs.answers == ["Here are your tasks. You don't have any tasks yet."]


@pytest.mark.asyncio
async def test_handler_falls_back_to_chat_id() -> None:
    app = _make_app()

    await handle_message(_FakeMessage('add task "A"', user_id=None, chat_id=55), app)  # type: ignore[arg-type]

    assert [t.title for t in await app.store.list_tasks(55)] == ["A"]


@pytest.mark.asyncio
async def test_handler_hides_store_errors() -> None:
    class _BrokenStore(MemoryGoalStore):
        async def list_tasks(self, user_id: int) -> list[Any]:
            raise RuntimeError("connection refused: secret-host:5432")

    message = _FakeMessage("show my tasks")

    await handle_message(message, _make_app(_BrokenStore()))  # type: ignore[arg-type]

    assert message.answers == [SOMETHING_WENT_WRONG]
