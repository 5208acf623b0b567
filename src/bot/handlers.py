"""aiogram message handlers.

Hard contract: every incoming message gets exactly one text reply. Unrecognized input gets a
clarifying question; internal errors get a generic apology and are logged, never echoed.
"""

from __future__ import annotations

import logging
from time import monotonic

from aiogram.types import Message

from src.app import App
from src.commands.executor import execute_command
from src.intent.composer import NOT_UNDERSTOOD
from src.intent.interpreter import interpret

logger = logging.getLogger(__name__)

SOMETHING_WENT_WRONG = "Something went wrong while processing your request."
SEND_TRANSCRIPT = "Please send the transcribed text of your voice note."

_COMMAND_UTTERANCES: dict[str, str] = {
    "/start": "help",
    "/help": "help",
}


def _is_command_text(text: str) -> bool:
    return text.lstrip().startswith("/")


def _command_utterance(text: str) -> str | None:
    """Map a slash command (`/help`, `/start@MyBot`) to the utterance it stands for."""

    command = text.strip().split(maxsplit=1)[0].split("@", maxsplit=1)[0].lower()
    return _COMMAND_UTTERANCES.get(command)


def _user_id(message: Message) -> int:
    if message.from_user is not None:
        return message.from_user.id
    return message.chat.id


async def handle_message(message: Message, app: App) -> None:
    """Handle any incoming Telegram message and reply with exactly one text message."""

    started = monotonic()

    raw_text = message.text or message.caption or ""
    if not raw_text.strip():
        if message.voice is not None or message.audio is not None:
            await message.answer(SEND_TRANSCRIPT)
        else:
            await message.answer(NOT_UNDERSTOOD)
        return

    if _is_command_text(raw_text):
        utterance = _command_utterance(raw_text)
        if utterance is None:
            await message.answer(NOT_UNDERSTOOD)
            return
        raw_text = utterance

    reply = SOMETHING_WENT_WRONG

    # noinspection PyBroadException
    try:
        user_id = _user_id(message)
        outcome = await execute_command(interpret(raw_text), user_id=user_id, store=app.store)
        reply = outcome.reply

        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "handled user_id=%s intent=%s performed=%s latency_ms=%d",
            user_id,
            outcome.parsed.intent,
            outcome.performed,
            latency_ms,
        )
    except Exception:
        # Handler boundary: store failures must still produce a reply, without leaking details.
        logger.exception("handler failed")

    await message.answer(reply)
