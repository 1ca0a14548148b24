"""Parser for ``.properties`` key/value files.

Supports the full line syntax of the format: ``#`` and ``!`` comments,
``=``, ``:`` or whitespace between key and value, backslash line
continuations and the ``\\t \\n \\r \\f \\uXXXX`` escapes.
"""

from __future__ import annotations

import re
import string
from typing import Final, Iterator

_NEWLINE: Final = re.compile(r"\r\n|\r|\n")
_WHITESPACE: Final = " \t\f"
_SEPARATORS: Final = "=:"
_COMMENT_MARKERS: Final = "#!"
_ESCAPES: Final = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties ``text`` into a dict.

    Later entries replace earlier ones with the same key. Values keep
    trailing whitespace.

    Raises:
        ValueError: On a malformed ``\\uXXXX`` escape.
    """
    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


def _logical_lines(text: str) -> Iterator[str]:
    parts: list[str] = []
    for natural in _NEWLINE.split(text):
        line = natural.lstrip(_WHITESPACE)
        if not parts and (not line or line[0] in _COMMENT_MARKERS):
            continue
        # An odd run of trailing backslashes continues onto the next line.
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            parts.append(line[:-1])
            continue
        parts.append(line)
        yield "".join(parts)
        parts = []
    if parts:
        yield "".join(parts)


def _split(line: str) -> tuple[str, str]:
    end = 0
    while end < len(line):
        c = line[end]
        if c == "\\":
            end += 2
            continue
        if c in _SEPARATORS or c in _WHITESPACE:
            break
        end += 1

    rest = line[end:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:end], rest


def _unescape(s: str) -> str:
    if "\\" not in s:
        return s

    out: list[str] = []
    i = 0
    while i < len(s):
        c = s[i]
        i += 1
        if c != "\\" or i == len(s):
            out.append(c)
            continue
        c = s[i]
        i += 1
        if c == "u":
            digits = s[i : i + 4]
            if len(digits) < 4 or any(d not in string.hexdigits for d in digits):
                raise ValueError(f"Malformed \\uXXXX escape: {s[i - 2 : i + 4]!r}")
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_ESCAPES.get(c, c))
    return "".join(out)
