"""
Display normalizers for list rows: subject and single-line snippet.

Display-only: the stored message is never modified.
"""
import re
from typing import List, Optional

from mailsafe.config.constants import MAX_SNIPPET_LENGTH, TECHNICAL_HEADER_NAMES
from mailsafe.preview.preview_rules import HEADER_LINE, REPLY_ATTRIBUTION, SUBJECT_PREFIX

_BOILERPLATE_PHRASES: List[str] = [
    "---------- forwarded message ----------",
    "-----original message-----",
    "begin forwarded message",
    "forwarded message:",
    "--- forwarded message ---",
]

_RULE_LINE = re.compile(r"(?:-{3}|_{3})[-_ \t]*")
_TECHNICAL_HEADER = re.compile(
    r"(?:x-[^:\s]+|" + "|".join(re.escape(h) for h in TECHNICAL_HEADER_NAMES) + r")[ \t]*:.*",
    re.IGNORECASE,
)


def normalize_subject_for_display(subject: str) -> str:
    """
    Remove repeated leading prefixes (Fwd:, Fw:, Re:) from *subject*.

    >>> normalize_subject_for_display("FWD: RE: fwd: re: Test")
    'Test'
    """
    if not subject:
        return ""
    return SUBJECT_PREFIX.sub("", subject.strip(), count=1).strip()


def _is_boilerplate(line: str) -> bool:
    lower = line.lower()
    if any(phrase in lower for phrase in _BOILERPLATE_PHRASES):
        return True
    if HEADER_LINE.fullmatch(line):
        return True
    return bool(_RULE_LINE.fullmatch(line)) and sum(c in "-_" for c in line) > 5


def _is_punctuation_heavy(line: str) -> bool:
    """At least 60% of the characters are not letters or digits."""
    if len(line) < 4:
        return False
    alnum = sum(c.isalnum() for c in line)
    return alnum / len(line) < 0.4


def _has_meaningful_content(line: str) -> bool:
    return sum(c.isalnum() for c in line) >= 6 and any(c.isalpha() for c in line)


def normalize_snippet_for_display(snippet: str, max_length: int = MAX_SNIPPET_LENGTH) -> str:
    """
    Reduce a provider snippet to one clean line for the inbox list.

    Stops at the first quote attribution, skips boilerplate, quoted,
    punctuation-heavy and technical-header lines, then picks the first line
    with real content (at least six alphanumerics and a letter), falling
    back to the first surviving line. The result is whitespace-collapsed
    and truncated to *max_length* at a word boundary with ``...``.
    """
    if not snippet:
        return ""

    text = snippet.replace("\r\n", "\n").replace("\r", "\n")
    kept: List[str] = []

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        if REPLY_ATTRIBUTION.fullmatch(line):
            break
        if (
            _is_boilerplate(line)
            or line.startswith(">")
            or _is_punctuation_heavy(line)
            or _TECHNICAL_HEADER.fullmatch(line)
        ):
            continue
        kept.append(line)

    chosen: Optional[str] = next((line for line in kept if _has_meaningful_content(line)), None)
    if chosen is None:
        if not kept:
            return ""
        chosen = kept[0]

    result = " ".join(chosen.split())
    if len(result) > max_length:
        truncated = result[: max(max_length - 3, 0)]
        last_space = truncated.rfind(" ")
        if last_space > 0:
            truncated = truncated[:last_space]
        result = truncated + "..."
    return result
