"""Text normalization for pattern-based intent classification."""

from __future__ import annotations


def normalize_text(text: str) -> str:
    """Normalize an utterance for intent classification.

    Normalization is intentionally minimal: strip surrounding whitespace and lowercase. Quotes and
    punctuation are kept because entity patterns rely on them.
    """

    return (text or "").strip().lower()
