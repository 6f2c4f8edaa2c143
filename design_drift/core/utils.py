"""
Shared helpers for drift processing: glob matching, location parsing and
rounding that stays stable across platforms.
"""

import math
import re
from functools import lru_cache
from typing import List, Optional, Pattern

_LINE_SUFFIX = re.compile(r":\d+$")


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> Pattern[str]:
    """
    Translate a glob pattern into an anchored regular expression.

    Supports ``**`` (any depth, including zero directories when followed by
    a slash), ``*`` and ``?`` (never crossing ``/``), ``[...]`` classes and
    ``{a,b}`` alternatives.

    Raises:
        ValueError: If the pattern has an unterminated class or brace group,
            or a class the regex engine rejects (e.g. a reversed range).
    """
    parts: List[str] = []
    i = 0
    depth = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    parts.append("(?:.*/)?")
                    i += 1
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                raise ValueError(f"Unterminated character class in glob: {pattern}")
            body = pattern[i + 1:end]
            if body.startswith("!"):
                body = "^/" + body[1:]
            parts.append(f"[{body}]")
            i = end
        elif c == "{":
            depth += 1
            parts.append("(?:")
        elif c == "}" and depth:
            depth -= 1
            parts.append(")")
        elif c == "," and depth:
            parts.append("|")
        else:
            parts.append(re.escape(c))
        i += 1
    if depth:
        raise ValueError(f"Unterminated brace group in glob: {pattern}")
    try:
        return re.compile("^" + "".join(parts) + "$")
    except re.error as exc:
        raise ValueError(f"Invalid glob pattern {pattern}: {exc}") from exc


def normalize_path(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def match_glob(path: str, pattern: str) -> bool:
    """Return True if ``path`` matches the glob ``pattern``."""
    return bool(compile_glob(normalize_path(pattern)).match(normalize_path(path)))


def strip_line_suffix(location: str) -> str:
    """Drop a trailing ``:<line>`` from a signal location."""
    return _LINE_SUFFIX.sub("", location or "")


def parent_directory(file_path: str) -> Optional[str]:
    """Immediate parent directory, or None for a bare file name."""
    file_path = normalize_path(file_path)
    if "/" not in file_path:
        return None
    return file_path.rsplit("/", 1)[0]


def ancestor_directories(file_path: str) -> List[str]:
    """All directories containing ``file_path``, deepest first."""
    dirs: List[str] = []
    current = parent_directory(file_path)
    while current:
        dirs.append(current)
        current = parent_directory(current)
    return dirs


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores use half-up.
    return int(math.floor(value + 0.5))
