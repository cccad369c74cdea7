"""
Common helpers for printing catalog records in the CLI.
"""

from __future__ import annotations

from typing import Any, Dict, List


def format_snippet(text: str, length: int = 120) -> str:
    """
    Truncate `text` to at most `length` characters. Append an ellipsis if it was shortened.

    Args:
        text: The full text to trim.
        length: Maximum number of characters to retain.

    Returns:
        The original text if shorter than `length`, otherwise a truncated version with `…`.
    """
    if not text:
        return ""
    text = text.strip()
    if len(text) <= length:
        return text
    return text[:length] + "…"


def format_tags(tags: List[str]) -> str:
    """Render tags as "[a, b, c]", or an empty string when there are none."""
    if not tags:
        return ""
    return f"[{', '.join(tags)}]"


def format_effect(effect: Dict[str, Any]) -> str:
    """
    Build a one-line summary of an effect entry.

    Type and value come first; scope, condition, duration, stacks and note are appended
    when present. Missing fields are skipped gracefully.

    Returns:
        A string such as "resist 25% (fear; 10s)".
    """
    if not effect:
        return ""

    head = " ".join(str(effect[k]) for k in ("type", "value") if effect.get(k) not in (None, ""))

    extras: list[str] = []
    scope = effect.get("scope")
    if isinstance(scope, list):
        scope = "/".join(scope)
    for value in (scope, effect.get("condition"), effect.get("duration")):
        if value:
            extras.append(str(value))
    if effect.get("stacks"):
        extras.append(f"x{effect['stacks']}")
    if effect.get("note"):
        extras.append(str(effect["note"]))

    if not extras:
        return head
    return f"{head} ({'; '.join(extras)})"
