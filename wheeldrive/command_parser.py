"""Parser for batches of position commands.

The text is a ``;``-separated list of ``(displacement, vel_max[, vel_end])``
tuples; a missing ``vel_end`` means 0. A trailing ``;`` is allowed.
"""

from __future__ import annotations

import re
from collections import deque
from typing import Deque, List, Optional, Tuple

from .protocol import PositionCommand

__all__ = ["ParseError", "CommandParser", "parse_position_commands"]

_SPACE = re.compile(r"[ \t\r\n]*")
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_EXPONENT_MARK = re.compile(r"[eE][+-]?")
_DIGITS = re.compile(r"\d+")
_SPECIAL = re.compile(r"nan|infinity|inf", re.IGNORECASE)


class ParseError(ValueError):
    """The command text is not a valid list of position commands."""

    def __init__(self, text: str, position: int) -> None:
        super().__init__(f"invalid position command at offset {position}: {text[position:]!r}")
        self.text = text
        self.position = position


class _Cut(Exception):
    def __init__(self, position: int) -> None:
        super().__init__(position)
        self.position = position


def _ws(text: str, pos: int) -> int:
    return _SPACE.match(text, pos).end()


def _tag(text: str, pos: int, char: str) -> Optional[int]:
    return pos + 1 if text.startswith(char, pos) else None


def _padded_tag(text: str, pos: int, char: str) -> Optional[int]:
    end = _tag(text, _ws(text, pos), char)
    return None if end is None else _ws(text, end)


def _float(text: str, pos: int) -> Optional[Tuple[float, int]]:
    number = _NUMBER.match(text, pos)
    if number:
        end = number.end()
        mark = _EXPONENT_MARK.match(text, end)
        if mark:
            digits = _DIGITS.match(text, mark.end())
            if not digits:
                raise _Cut(mark.end())
            end = digits.end()
        return float(text[pos:end]), end
    special = _SPECIAL.match(text, pos)
    if special:
        return float(special.group()), special.end()
    return None


def _command(text: str, pos: int) -> Optional[Tuple[PositionCommand, int]]:
    pos = _padded_tag(text, pos, "(")
    if pos is None:
        return None
    first = _float(text, pos)
    if first is None:
        return None
    displacement, pos = first

    pos = _padded_tag(text, pos, ",")
    if pos is None:
        return None
    second = _float(text, pos)
    if second is None:
        return None
    vel_max, pos = second

    pos = _ws(text, pos)
    comma = _tag(text, pos, ",")
    if comma is not None:
        pos = comma
    pos = _ws(text, pos)
    third = _float(text, pos)
    vel_end = 0.0
    if third is not None:
        vel_end, pos = third

    pos = _padded_tag(text, pos, ")")
    if pos is None:
        return None
    return PositionCommand(displacement, vel_max, vel_end), pos


def parse_position_commands(text: str) -> List[PositionCommand]:
    """Parse the whole text into a list of position commands."""
    commands: List[PositionCommand] = []
    pos = 0
    try:
        parsed = _command(text, pos)
        while parsed is not None:
            command, pos = parsed
            commands.append(command)
            after_sep = _padded_tag(text, pos, ";")
            if after_sep is None:
                break
            parsed = _command(text, after_sep)
        trailing = _padded_tag(text, pos, ";")
        if trailing is not None:
            pos = trailing
    except _Cut as cut:
        raise ParseError(text, cut.position) from None
    if pos != len(text):
        raise ParseError(text, pos)
    return commands


class CommandParser:
    """Holds the position commands parsed from the most recent valid text."""

    def __init__(self) -> None:
        self._queue: Deque[PositionCommand] = deque()

    def __len__(self) -> int:
        return len(self._queue)

    def parse(self, text: str) -> None:
        """Replace the queued commands with those in ``text``.

        On a parse error the queue is left unchanged.
        """
        self._queue = deque(parse_position_commands(text))

    def pop_command(self) -> Optional[PositionCommand]:
        """Take the oldest queued command, or ``None`` if there is none."""
        return self._queue.popleft() if self._queue else None

    def reset(self) -> None:
        """Drop all queued commands."""
        self._queue.clear()