"""Pattern detectors: functions from text to character ranges.

A detector is any callable ``(text) -> Sequence[TextRange]``. The builder
runs one over its plain text and styles every range it returns. The
built-in detectors below are regex based and deliberately simple; swap
them through ``StyleConfig.detectors`` when you need a real URL or phone
number grammar.

Example:
    >>> [str(r) for r in detect_hashtags("see #rust and #python")]
    ['[4, 9)', '[14, 21)']
    >>> [str(r) for r in detect_regex("see #rust now", r"#\\w+")]
    ['[4, 9)']

Thread Safety:
All detectors are pure functions over their input.

"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from enum import Flag, auto
from types import MappingProxyType

from tinct.errors import DetectionError, InvalidRangeError
from tinct.ranges import TextRange

type Detector = Callable[[str], Sequence[TextRange]]


class DetectionType(Flag):
    """Kinds of text the built-in detectors recognize.

    Members combine with ``|`` so one call can style several kinds at once.
    """

    HASHTAG = auto()
    MENTION = auto()
    LINK = auto()
    EMAIL = auto()
    PHONE_NUMBER = auto()


# A tag or mention must not be glued to a preceding word character
_HASHTAG_RE = re.compile(r"(?<![\w#])#\w+")
_MENTION_RE = re.compile(r"(?<![\w@])@\w+")

# scheme://... or www.... up to whitespace or markup-ish delimiters
_LINK_RE = re.compile(r"\b(?:[a-zA-Z][a-zA-Z0-9+.\-]{1,31}://|www\.)[^\s<>\"]+")

_EMAIL_RE = re.compile(
    r"(?<![\w.+\-])[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~\-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)+"
)

# Optional +country, groups of digits separated by space, dot, dash or parens
_PHONE_RE = re.compile(r"(?<![\w+])\+?\(?\d{1,4}\)?(?:[\s.\-]?\(?\d{2,4}\)?){2,5}(?!\w)")
_PHONE_MIN_DIGITS = 7
_PHONE_MAX_DIGITS = 15

# Characters trimmed from the end of a detected link ("see https://x.org.")
_LINK_TRAILING = ".,:;!?'\""


def _matches(pattern: re.Pattern[str], text: str) -> list[TextRange]:
    return [TextRange.from_span(m.span()) for m in pattern.finditer(text)]


def detect_hashtags(text: str) -> list[TextRange]:
    """Ranges of ``#word`` tokens, including the ``#``."""
    return _matches(_HASHTAG_RE, text)


def detect_mentions(text: str) -> list[TextRange]:
    """Ranges of ``@name`` tokens, including the ``@``."""
    return _matches(_MENTION_RE, text)


def detect_links(text: str) -> list[TextRange]:
    """Ranges of URLs with a scheme or a ``www.`` prefix.

    Trailing punctuation is not part of the link, and a closing parenthesis
    is only kept when the URL contains a matching opening one.
    """
    ranges: list[TextRange] = []
    for match in _LINK_RE.finditer(text):
        start, end = match.span()
        while end > start:
            last = text[end - 1]
            if last in _LINK_TRAILING:
                end -= 1
            elif last == ")" and text.count("(", start, end) < text.count(")", start, end):
                end -= 1
            else:
                break
        if end > start:
            ranges.append(TextRange(start, end))
    return ranges


def detect_emails(text: str) -> list[TextRange]:
    """Ranges of ``local@domain.tld`` addresses."""
    return _matches(_EMAIL_RE, text)


def detect_phone_numbers(text: str) -> list[TextRange]:
    """Ranges of phone-number-like digit groups (7 to 15 digits)."""
    ranges: list[TextRange] = []
    for match in _PHONE_RE.finditer(text):
        digits = sum(ch.isdigit() for ch in match.group(0))
        if _PHONE_MIN_DIGITS <= digits <= _PHONE_MAX_DIGITS:
            ranges.append(TextRange.from_span(match.span()))
    return ranges


def compile_pattern(pattern: str | re.Pattern[str], flags: int = 0) -> re.Pattern[str]:
    """Compile a user-supplied pattern.

    Raises:
        DetectionError: If the pattern is not a valid regular expression
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise DetectionError(pattern, f"invalid pattern: {exc}") from exc


def detect_regex(text: str, pattern: str | re.Pattern[str], flags: int = 0) -> list[TextRange]:
    """Ranges of every match of pattern in text.

    Empty matches are skipped.

    Raises:
        DetectionError: If the pattern is not a valid regular expression
    """
    compiled = compile_pattern(pattern, flags)
    return [
        TextRange.from_span(m.span()) for m in compiled.finditer(text) if m.end() > m.start()
    ]


BUILTIN_DETECTORS: Mapping[DetectionType, Detector] = MappingProxyType(
    {
        DetectionType.HASHTAG: detect_hashtags,
        DetectionType.MENTION: detect_mentions,
        DetectionType.LINK: detect_links,
        DetectionType.EMAIL: detect_emails,
        DetectionType.PHONE_NUMBER: detect_phone_numbers,
    }
)


def run_detector(detector: Detector, text: str, *, name: str | None = None) -> list[TextRange]:
    """Run a detector and validate what it returns.

    Accepts TextRange values or ``(start, end)`` pairs from third-party
    detectors. Every range is checked against the text length.

    Raises:
        DetectionError: If the detector returns something that is not a
            valid range over text
    """
    label = name or getattr(detector, "__name__", type(detector).__name__)
    ranges: list[TextRange] = []
    for item in detector(text):
        try:
            candidate = item if isinstance(item, TextRange) else TextRange.from_span(item)
            ranges.append(candidate.check(len(text)))
        except (InvalidRangeError, TypeError, IndexError) as exc:
            raise DetectionError(label, f"returned invalid range {item!r}") from exc
    return ranges


def detect_types(
    text: str,
    types: DetectionType,
    detectors: Mapping[DetectionType, Detector] = BUILTIN_DETECTORS,
) -> list[TextRange]:
    """Ranges found by every detector selected in types, sorted by position.

    A range found by two detectors is returned once.

    Raises:
        DetectionError: If a selected type has no detector registered
    """
    found: set[TextRange] = set()
    for member in DetectionType:
        if member not in types:
            continue
        detector = detectors.get(member)
        if detector is None:
            raise DetectionError(member.name or str(member), "no detector registered")
        found.update(run_detector(detector, text, name=member.name))
    return sorted(found)
