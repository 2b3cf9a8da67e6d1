"""Terminal text utilities: grapheme segmentation, width measurement, wrapping.

Offsets handed around by the editing layer are Python ``str`` indices
(codepoints). These helpers translate between those offsets, grapheme
clusters and terminal columns.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


def _clusters(text: str) -> list[str]:
    return list(grapheme.graphemes(text))


def previous_boundary(text: str, offset: int) -> int:
    """Start of the grapheme cluster that ends at *offset*."""
    if offset <= 0:
        return 0
    offset = min(offset, len(text))
    clusters = _clusters(text[:offset])
    return offset - len(clusters[-1]) if clusters else 0


def next_boundary(text: str, offset: int) -> int:
    """End of the grapheme cluster that starts at *offset*."""
    if offset >= len(text):
        return len(text)
    offset = max(offset, 0)
    clusters = _clusters(text[offset:])
    return offset + len(clusters[0]) if clusters else len(text)


# ---------------------------------------------------------------------------
# ANSI handling
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z]"      # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
)

_PUNCTUATION_REGEX = re.compile(r"[(){}\[\]<>.,;:'\"!?\+\-=*/\\|&%\^$#@~`_]")


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


# ---------------------------------------------------------------------------
# Width
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tones, regional indicators
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Visible terminal width of *text*, ignoring ANSI escapes."""
    if not text:
        return 0

    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(stripped))

    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = total
    return total


# ---------------------------------------------------------------------------
# Wrapping / truncation
# ---------------------------------------------------------------------------


def _hard_split(word: str, width: int) -> list[str]:
    """Split a single word into pieces no wider than *width* columns."""
    pieces: list[str] = []
    current = ""
    current_width = 0
    for g in grapheme.graphemes(word):
        w = grapheme_width(g)
        if current and current_width + w > width:
            pieces.append(current)
            current = ""
            current_width = 0
        current += g
        current_width += w
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, width: int) -> list[str]:
    """Word-wrap plain *text* to *width* columns.

    Explicit newlines are kept as paragraph breaks. Words wider than the
    available width are split at grapheme boundaries. Always returns at least
    one (possibly empty) line.
    """
    if width <= 0:
        return [text]

    lines: list[str] = []
    for paragraph in text.split("\n"):
        current = ""
        current_width = 0
        for word in paragraph.split():
            word_width = visible_width(word)

            if current and current_width + 1 + word_width > width:
                lines.append(current)
                current = ""
                current_width = 0

            if word_width > width:
                if current:
                    lines.append(current)
                pieces = _hard_split(word, width)
                lines.extend(pieces[:-1])
                current = pieces[-1]
                current_width = visible_width(current)
                continue

            if current:
                current += " "
                current_width += 1
            current += word
            current_width += word_width

        lines.append(current)

    return lines or [""]


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate plain *text* to *max_width* columns, appending *ellipsis*."""
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    target = max_width - visible_width(ellipsis)
    if target <= 0:
        return ellipsis[:max_width]

    result = ""
    cols = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if cols + w > target:
            break
        result += g
        cols += w
    return result + ellipsis


def pad_to_width(text: str, width: int) -> str:
    """Right-pad *text* (which may contain ANSI codes) with spaces."""
    return text + " " * max(0, width - visible_width(text))


_BLANKS = frozenset(" \t\n\r\f\v")


def is_whitespace_char(char: str) -> bool:
    return char in _BLANKS


def is_punctuation_char(char: str) -> bool:
    return _PUNCTUATION_REGEX.match(char) is not None


def is_word_boundary_char(char: str) -> bool:
    """Characters that close an undo group when typed."""
    return is_whitespace_char(char) or is_punctuation_char(char)
