"""Glob matching for repository-relative paths.

Two flavours are provided:

* ``match_segment_glob`` follows single-segment glob rules: ``*`` and ``?``
  never cross a ``/``, ``[...]`` classes support ranges and ``^`` negation,
  and ``\\`` escapes the next character. Malformed patterns never match.
* ``matches`` adds a simplified ``**`` form used by rule configs. The pattern
  is split once on the first ``**``; the path must start with the prefix and,
  if a suffix is present, some tail of the remaining segments must match the
  suffix. This is not full recursive glob semantics and must stay that way,
  since existing rules.yml files depend on its suffix-boundary behaviour.
"""

import re
from functools import lru_cache

SEPARATOR = "/"
RECURSIVE_WILDCARD = "**"


class _BadPattern(ValueError):
    """Internal marker for a malformed glob."""


def _class_char(pattern: str, index: int) -> tuple[str, int]:
    """Read one (possibly escaped) character inside a [...] class."""
    if index >= len(pattern):
        raise _BadPattern(pattern)
    char = pattern[index]
    if char in "-]":
        raise _BadPattern(pattern)
    if char == "\\":
        index += 1
        if index >= len(pattern):
            raise _BadPattern(pattern)
        char = pattern[index]
    return char, index + 1


def _translate_class(pattern: str, index: int) -> tuple[str, int]:
    """Translate a character class starting just after '['."""
    negated = False
    if index < len(pattern) and pattern[index] == "^":
        negated = True
        index += 1

    items: list[str] = []
    ranges = 0
    while True:
        if index < len(pattern) and pattern[index] == "]" and ranges > 0:
            index += 1
            break
        lo, index = _class_char(pattern, index)
        hi = lo
        if index < len(pattern) and pattern[index] == "-":
            hi, index = _class_char(pattern, index + 1)
        ranges += 1
        if lo > hi:
            continue  # empty range, matches nothing
        if lo == hi:
            items.append(re.escape(lo))
        else:
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")

    if not items:
        return (r"[\s\S]" if negated else "(?!)"), index
    return "[" + ("^" if negated else "") + "".join(items) + "]", index


@lru_cache(maxsize=512)
def _compile_segment_glob(pattern: str) -> re.Pattern[str] | None:
    """Compile a glob to a regex, or None if the glob is malformed."""
    parts: list[str] = []
    index = 0
    try:
        while index < len(pattern):
            char = pattern[index]
            index += 1
            if char == "*":
                parts.append("[^/]*")
            elif char == "?":
                parts.append("[^/]")
            elif char == "\\":
                if index >= len(pattern):
                    raise _BadPattern(pattern)
                parts.append(re.escape(pattern[index]))
                index += 1
            elif char == "[":
                translated, index = _translate_class(pattern, index)
                parts.append(translated)
            else:
                parts.append(re.escape(char))
    except _BadPattern:
        return None
    return re.compile("".join(parts), re.DOTALL)


def match_segment_glob(path: str, pattern: str) -> bool:
    """Match ``path`` against a glob whose wildcards stay within one segment."""
    compiled = _compile_segment_glob(pattern)
    if compiled is None:
        return False
    return compiled.fullmatch(path) is not None


def matches(path: str, pattern: str) -> bool:
    """Match ``path`` against a rule glob, honouring the ``**`` shorthand.

    Examples:
        >>> matches("domain/service/User.kt", "domain/**")
        True
        >>> matches("src/model.kt", "**/*.kt")
        True
    """
    if RECURSIVE_WILDCARD not in pattern:
        return match_segment_glob(path, pattern)

    prefix, suffix = pattern.split(RECURSIVE_WILDCARD, 1)
    suffix = suffix.lstrip(SEPARATOR)

    if prefix:
        prefix = prefix.rstrip(SEPARATOR)
        if not path.startswith(prefix):
            return False

    if not suffix:
        return True

    remaining = path
    if prefix:
        remaining = path[len(prefix):].lstrip(SEPARATOR)

    segments = remaining.split(SEPARATOR)
    for start in range(len(segments)):
        if match_segment_glob(SEPARATOR.join(segments[start:]), suffix):
            return True
    return False


def matches_any(path: str, patterns: list[str]) -> bool:
    """Return True if ``path`` matches at least one rule glob."""
    return any(matches(path, pattern) for pattern in patterns)


def filter_by_globs(files: list[str], globs: list[str]) -> list[str]:
    """Return the files matching any glob, preserving input order."""
    return [file_path for file_path in files if matches_any(file_path, globs)]
