"""Named capture group extraction.

Matches text against a regular expression with named groups and returns
the groups that took part in the match as an ordered name -> value dict.

Pattern dialects:
    Python's re only understands (?P<name>...) and (?P=name). Patterns
    written for other engines commonly use (?<name>...), (?'name'...) and
    \\k<name>; these are rewritten to the Python spelling before compiling.
    Lookbehind assertions, escapes and character classes are left as-is.

Example:
    >>> parse_group_names_with_values(
    ...     "Connor, John (19)",
    ...     r"^(?<LastName>\\w.*), (?<FirstName>\\w.*) \\((?<Age>\\w.*)\\)",
    ... )
    {'LastName': 'Connor', 'FirstName': 'John', 'Age': '19'}
"""
import re
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Union

import structlog

from regex_record.config import get_settings
from regex_record.errors.exceptions import NoMatchError, PatternError
from regex_record.models.extraction import NoMatchPolicy

logger = structlog.get_logger(__name__)

# One LRU-wrapped compiler per configured cache size
_compilers: Dict[int, Callable[[str], "re.Pattern[str]"]] = {}


def to_python_syntax(pattern: str) -> str:
    """Rewrite foreign named-group syntax into Python's re dialect.

    Args:
        pattern: Regular expression, possibly using (?<name>...) groups

    Returns:
        Equivalent pattern using (?P<name>...) groups
    """
    out: List[str] = []
    i = 0
    length = len(pattern)
    in_class = False
    class_start = -1

    while i < length:
        char = pattern[i]

        if char == "\\":
            if not in_class and pattern.startswith("\\k<", i):
                end = pattern.find(">", i + 3)
                if end != -1:
                    out.append(f"(?P={pattern[i + 3:end]})")
                    i = end + 1
                    continue
            out.append(pattern[i:i + 2])
            i += 2
            continue

        if in_class:
            # "]" right after "[" or "[^" is a literal
            if char == "]" and i > class_start:
                in_class = False
            out.append(char)
            i += 1
            continue

        if char == "[":
            in_class = True
            class_start = i + 1
            if pattern.startswith("^", class_start):
                class_start += 1
            out.append(char)
            i += 1
            continue

        if pattern.startswith("(?<", i) and pattern[i + 3:i + 4] not in ("=", "!"):
            out.append("(?P<")
            i += 3
            continue

        if pattern.startswith("(?'", i):
            end = pattern.find("'", i + 3)
            if end != -1:
                out.append(f"(?P<{pattern[i + 3:end]}>")
                i = end + 1
                continue

        out.append(char)
        i += 1

    return "".join(out)


def _compile(pattern: str) -> "re.Pattern[str]":
    """Compile a pattern, translating re.error into PatternError."""
    try:
        compiled = re.compile(to_python_syntax(pattern))
    except re.error as e:
        raise PatternError(
            f"Invalid pattern {pattern!r}: {e.msg}",
            pattern=pattern,
            position=e.pos,
        ) from e

    logger.debug(
        "pattern_compiled",
        pattern=pattern,
        groups=group_names(compiled),
    )
    return compiled


def compile_pattern(pattern: Union[str, "re.Pattern[str]"]) -> "re.Pattern[str]":
    """Compile a pattern, reusing cached compilations.

    Args:
        pattern: Pattern string, or an already compiled pattern

    Returns:
        Compiled pattern

    Raises:
        PatternError: If the regex engine rejects the pattern
    """
    if isinstance(pattern, re.Pattern):
        return pattern

    size = get_settings().pattern_cache_size
    compiler = _compilers.get(size)
    if compiler is None:
        compiler = lru_cache(maxsize=size)(_compile)
        _compilers[size] = compiler
    return compiler(pattern)


def group_names(compiled: "re.Pattern[str]") -> List[str]:
    """Return the named groups of a compiled pattern in declaration order.

    The whole-match group and unnamed groups are never included.
    """
    return [
        name
        for name, _ in sorted(compiled.groupindex.items(), key=lambda item: item[1])
    ]


def extract_groups(
    compiled: "re.Pattern[str]",
    text: str,
    no_match: Optional[NoMatchPolicy] = None,
) -> Dict[str, str]:
    """Extract participating named groups from text with a compiled pattern.

    Args:
        compiled: Compiled pattern with named groups
        text: Input text, searched without implicit anchors
        no_match: Policy when nothing matches (defaults to settings.no_match)

    Returns:
        Ordered dict of group name -> captured text. Groups that did not
        participate in the match are omitted; a group that matched the
        empty string maps to "".

    Raises:
        NoMatchError: If nothing matches and the policy is "raise"
    """
    match = compiled.search(text)
    if match is None:
        policy = NoMatchPolicy(no_match or get_settings().no_match)
        if policy is NoMatchPolicy.RAISE:
            raise NoMatchError(
                f"Input does not match pattern {compiled.pattern!r}",
                pattern=compiled.pattern,
                text=text,
            )
        logger.debug("no_match", pattern=compiled.pattern, text=text[:100])
        return {}

    values: Dict[str, str] = {}
    for name in group_names(compiled):
        value = match.group(name)
        if value is not None:
            values[name] = value

    logger.debug(
        "groups_extracted",
        pattern=compiled.pattern,
        groups=list(values),
    )
    return values


def parse_group_names_with_values(
    text: str,
    pattern: Union[str, "re.Pattern[str]"],
    *,
    no_match: Optional[NoMatchPolicy] = None,
) -> Dict[str, str]:
    """Parse text with a named-group pattern into a name -> value dict.

    Args:
        text: The string to be parsed
        pattern: Pattern with named capture groups
        no_match: Policy when nothing matches (defaults to settings.no_match)

    Returns:
        Ordered dict of every named group that captured text

    Raises:
        PatternError: If the pattern is not a valid regular expression
        NoMatchError: If nothing matches and the policy is "raise"
    """
    return extract_groups(compile_pattern(pattern), text, no_match=no_match)
