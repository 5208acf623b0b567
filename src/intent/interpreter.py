"""Pattern-based command interpreter.

The interpreter is pure and total: every input, including non-string values, produces a
`ParsedCommand`. Unrecognized or malformed input yields `intent=None` with an empty entity record.
"""

from __future__ import annotations

from typing import Any

from src.intent.catalog import classify
from src.intent.entities import extract_entities
from src.intent.normalize import normalize_text
from src.intent.schema import NoEntities, ParsedCommand


def interpret(text: Any) -> ParsedCommand:
    """Interpret a raw utterance into an intent plus its entities.

    Classification runs on the normalized text; entities are extracted from the stripped input so
    quoted titles keep the user's casing.
    """

    if not isinstance(text, str) or not text.strip():
        return ParsedCommand(intent=None, entities=NoEntities(), original_command=text)

    intent = classify(normalize_text(text))
    entities = extract_entities(intent, text.strip())
    return ParsedCommand(intent=intent, entities=entities, original_command=text)
