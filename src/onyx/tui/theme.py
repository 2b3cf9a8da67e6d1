"""Color themes as per-role styling functions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

_RESET = "\x1b[0m"


def _rgb(r: int, g: int, b: int, *, bold: bool = False, italic: bool = False) -> Callable[[str], str]:
    prefix = f"\x1b[38;2;{r};{g};{b}m"
    if bold:
        prefix += "\x1b[1m"
    if italic:
        prefix += "\x1b[3m"

    def style(text: str) -> str:
        return f"{prefix}{text}{_RESET}" if text else text

    return style


def _identity(text: str) -> str:
    return text


def reverse(text: str) -> str:
    """Reverse video, used for selections and the inline cursor."""
    return f"\x1b[7m{text}\x1b[27m" if text else text


@dataclass
class Theme:
    user_message: Callable[[str], str] = _identity
    user_label: Callable[[str], str] = _identity
    assistant_message: Callable[[str], str] = _identity
    assistant_label: Callable[[str], str] = _identity
    thinking: Callable[[str], str] = _identity
    input_active: Callable[[str], str] = _identity
    input_inactive: Callable[[str], str] = _identity
    border: Callable[[str], str] = _identity
    border_focused: Callable[[str], str] = _identity
    title: Callable[[str], str] = _identity
    help_text: Callable[[str], str] = _identity
    error: Callable[[str], str] = _identity
    selected: Callable[[str], str] = _identity
    selection: Callable[[str], str] = reverse


def default_theme() -> Theme:
    """Catppuccin-inspired truecolor theme."""
    return Theme(
        user_message=_rgb(138, 180, 248),
        user_label=_rgb(138, 180, 248, bold=True),
        assistant_message=_rgb(166, 227, 161),
        assistant_label=_rgb(166, 227, 161, bold=True),
        thinking=_rgb(127, 132, 156, italic=True),
        input_active=_rgb(203, 166, 247, bold=True),
        input_inactive=_rgb(127, 132, 156),
        border=_rgb(88, 91, 112),
        border_focused=_rgb(203, 166, 247, bold=True),
        title=_rgb(148, 226, 213, bold=True),
        help_text=_rgb(127, 132, 156, italic=True),
        error=_rgb(243, 139, 168, bold=True),
        selected=_rgb(249, 226, 175, bold=True),
    )


def plain_theme() -> Theme:
    """Theme that applies no formatting except reverse-video selection."""
    return Theme()
