"""Shortcut folder-name codec.

A shortcut's identity lives in its directory name:

    Bottom:  "\\ufeffBattletoads (World) (MD)"
    Top:     "0) Battletoads (World) (MD)"
    Alpha:   "Battletoads (World) (MD)"

Older installs carry a zero-width space or a visible star instead of the
current marker; decoding accepts all of them.
"""
import logging
import re
from pathlib import Path
from typing import List, NamedTuple, Optional, Pattern

from .models import Position, ShortcutName

logger = logging.getLogger(__name__)

# U+FEFF's UTF-8 lead byte (0xEF) sorts after every letter block under a
# case-insensitive byte compare, and it has no glyph.
CURRENT_MARKER = "\ufeff"
# U+200B renders as a box with some device fonts.
DEPRECATED_MARKERS = ("\u200b",)
LEGACY_GLYPH = "★"
TOP_PREFIX = "0) "
MARKER_FILE = ".shortcut"
POINTER_EXT = ".m3u"

_TOP_RE = re.compile(r"^\d+\) ")

class PrefixMatcher(NamedTuple):
    label: str
    pattern: Pattern
    position: Position
    marks_shortcut: bool    # a match alone proves the folder is a shortcut

def _literal(prefix: str) -> Pattern:
    return re.compile("^" + re.escape(prefix))

# Tried in order; the first match is stripped and fixes the position.
PREFIX_MATCHERS: List[PrefixMatcher] = [
    PrefixMatcher("current", _literal(CURRENT_MARKER), Position.BOTTOM, True),
    *[PrefixMatcher("deprecated", _literal(m), Position.BOTTOM, True) for m in DEPRECATED_MARKERS],
    PrefixMatcher("legacy-glyph", _literal(LEGACY_GLYPH + " "), Position.BOTTOM, True),
    PrefixMatcher("legacy-glyph-bare", _literal(LEGACY_GLYPH), Position.BOTTOM, True),
    PrefixMatcher("top", _TOP_RE, Position.TOP, False),
]

def extract_tag(name: str) -> str:
    """Text between the last "(" and the last ")", or "" when there is none.

    "Game Boy Advance (GBA)" -> "GBA"
    """
    start = name.rfind("(")
    if start < 0:
        return ""
    end = name.rfind(")")
    if end <= start:
        return ""
    return name[start + 1:end].strip()

def extract_display_name(name: str) -> str:
    """Name with the trailing "(TAG)" removed."""
    start = name.rfind("(")
    if start < 0:
        return name
    return name[:start].strip()

def strip_prefix(name: str):
    """Returns (rest, position, matcher) for the first matching prefix."""
    for matcher in PREFIX_MATCHERS:
        m = matcher.pattern.match(name)
        if m:
            logger.debug("strip_prefix: %r matched %s", name, matcher.label)
            return name[m.end():], matcher.position, matcher
    return name, Position.ALPHA, None

def _check_encodable(name: ShortcutName) -> None:
    display, tag = name.display, name.tag
    if not display or not tag:
        raise ValueError("display name and tag are required")
    if display != display.strip() or tag != tag.strip():
        raise ValueError(f"surrounding whitespace in {display!r} ({tag!r})")
    for part in (display, tag):
        if "/" in part or "\0" in part:
            raise ValueError(f"illegal character in {part!r}")
    if "(" in tag or ")" in tag:
        raise ValueError(f"tag may not contain parentheses: {tag!r}")
    if name.position is not Position.BOTTOM:
        # would be read back as a different position
        _, pos, _ = strip_prefix(display)
        if pos is not Position.ALPHA:
            raise ValueError(f"display name {display!r} starts with a sort prefix")

def encode(name: ShortcutName) -> str:
    _check_encodable(name)
    base = f"{name.display} ({name.tag})"
    if name.position is Position.TOP:
        return TOP_PREFIX + base
    if name.position is Position.ALPHA:
        return base
    return CURRENT_MARKER + base

def decode(folder_name: str) -> Optional[ShortcutName]:
    """Typed identity for a folder name; None when the name carries no tag."""
    rest, position, _ = strip_prefix(folder_name)
    tag = extract_tag(rest)
    if not tag:
        return None
    return ShortcutName(display=extract_display_name(rest), tag=tag, position=position)

def has_shortcut_marker(folder_name: str) -> bool:
    _, _, matcher = strip_prefix(folder_name)
    return matcher is not None and matcher.marks_shortcut

def is_shortcut_dir(path: Path) -> bool:
    """True for marker-prefixed folders and for folders holding a .shortcut file.

    Top and Alpha shortcuts look like ordinary folders, so only the marker
    file tells them apart from a category.
    """
    if has_shortcut_marker(path.name):
        return True
    return (path / MARKER_FILE).is_file()

def pointer_file_name(folder_name: str) -> str:
    return folder_name + POINTER_EXT
