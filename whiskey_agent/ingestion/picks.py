"""
Private Barrel Parser
=====================

Splits a raw menu name into the base product name and a store-pick /
private-barrel designation. Runs on the display string before normalization
so the pick text never leaks into the canonical key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Keywords that mark an inline tail as a pick designation
PICK_KEYWORDS = (
    r"private\s+barrel",
    r"private\s+selection",
    r"store\s+pick",
    r"single\s+barrel\s+select(?:ion)?",
    r"barrel\s+pick",
    r"cask\s+select(?:ion)?",
    r"pick",
)

# Keywords that mark a bracketed block as a pick designation
BRACKET_KEYWORDS = (
    r"pick",
    r"private",
    r"selection",
    r"barrel\s+select",
)

DASHES = re.compile(r"\s*[—–]\s*")

# A hyphen only separates when spaced ("Eagle Rare - Store Pick"), so
# hyphenated words like "Single-Barrel" are never split. The greedy base
# makes the last qualifying separator win.
INLINE_PICK = re.compile(
    r"^(?P<base>.+)(?:\s+-\s+|\s*[—|]\s*)"
    r"(?P<tail>[^()\[\]]*?\b(?:" + "|".join(PICK_KEYWORDS) + r")\b[^()\[\]]*)$",
    re.IGNORECASE,
)

BRACKETED_PICK = re.compile(
    r"^(?P<before>.*?)\s*[(\[]"
    r"(?P<inner>[^()\[\]]*?\b(?:" + "|".join(BRACKET_KEYWORDS) + r")\b[^()\[\]]*)"
    r"[)\]]\s*(?P<after>.*)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class PickParse:
    """Base product name plus the pick designation, if any."""

    base_name: str
    pick_info: str | None = None

    @property
    def is_pick(self) -> bool:
        return self.pick_info is not None


def parse_private_barrel(name: str | None) -> PickParse:
    """
    Separate a store-pick / private-barrel designation from a raw name.

    Examples:
        "Eagle Rare 10 - Store Pick"           -> ("Eagle Rare 10", "Store Pick")
        "Four Roses Single Barrel (OESK Pick)" -> ("Four Roses Single Barrel", "OESK Pick")
        "Old Forester 1920 - Portland Pick"    -> ("Old Forester 1920", "Portland Pick")
        "Weller Special Reserve"               -> ("Weller Special Reserve", None)

    A bare hyphen without a pick keyword in the tail never splits.
    """
    if not name:
        return PickParse(base_name="")

    cleaned = DASHES.sub(" — ", name).strip()

    match = INLINE_PICK.match(cleaned)
    if match:
        base = match.group("base").strip()
        tail = match.group("tail").strip()
        if base and tail:
            return PickParse(base_name=base, pick_info=tail)

    match = BRACKETED_PICK.match(cleaned)
    if match:
        inner = match.group("inner").strip()
        base = " ".join(
            part for part in (match.group("before").strip(), match.group("after").strip()) if part
        )
        return PickParse(base_name=base, pick_info=inner or None)

    return PickParse(base_name=name.strip())
