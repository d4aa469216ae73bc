"""
Preview rewrite rules — ordered stage table for the preview extractor.

Stages (each consumes the previous stage's output):
    1. truncate_forwarded_block
    2. truncate_reply_attribution
    3. strip_leading_headers
    4. truncate_signature
    5. drop_quoted_lines
    6. strip_subject_prefixes
    7. normalize_whitespace
    8. bound_length          (parametrized, appended by the extractor)

Forward and reply truncation run before signature truncation: a stale
quoted thread carries its own salutations, which must not be taken for the
current message's signature.

All patterns are applied per line or anchored at line starts with bounded
repetition, so the work is linear in the input.
"""
import re
from typing import List, Optional

from mailsafe.config.constants import (
    CLOSING_SALUTATIONS,
    DEVICE_SIGNATURE_PREFIXES,
    ELLIPSIS,
    FORWARD_BANNER_PHRASES,
    LEADING_HEADER_NAMES,
    SUBJECT_PREFIXES,
)
from mailsafe.models.rewrite import RewriteRule


def _alternation(words: List[str]) -> str:
    # longest first so "best regards" wins over "best"
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


# ======================================================================
# Patterns
# ======================================================================

FORWARD_MARKER = re.compile(
    rf"^[ \t]*(?:-{{2,}}[ \t]*(?:{_alternation(FORWARD_BANNER_PHRASES)})[ \t]*-{{2,}}"
    rf"|begin forwarded message\b)",
    re.IGNORECASE | re.MULTILINE,
)

REPLY_ATTRIBUTION = re.compile(
    r"[ \t]*(?:on[ \t].{1,200}|.{1,80})[ \t]wrote[ \t]*:[ \t]*",
    re.IGNORECASE,
)

# Gmail wraps long attributions: "On Mon, ... John Doe <" / "john@example.com> wrote:"
REPLY_ATTRIBUTION_START = re.compile(r"[ \t]*on[ \t].{1,200}", re.IGNORECASE)
REPLY_ATTRIBUTION_END = re.compile(r".{0,120}wrote[ \t]*:[ \t]*", re.IGNORECASE)

HEADER_LINE = re.compile(
    rf"[ \t]*(?:{_alternation(LEADING_HEADER_NAMES)})[ \t]*:.*",
    re.IGNORECASE,
)

SIGNATURE_DELIMITER = re.compile(r"[ \t]*--(?:[ \t].*)?")

CLOSING_SALUTATION = re.compile(
    rf"[ \t]*(?:{_alternation(CLOSING_SALUTATIONS)})[ \t]*[,.!]?[ \t]*",
    re.IGNORECASE,
)

DEVICE_SIGNATURE = re.compile(
    rf"[ \t]*(?:{_alternation(DEVICE_SIGNATURE_PREFIXES)})\b.*",
    re.IGNORECASE,
)

QUOTED_LINE = re.compile(r"[ \t]*[>|].*")

SUBJECT_PREFIX = re.compile(
    rf"\A\s*(?:(?:{_alternation(SUBJECT_PREFIXES)})[ \t]*:\s*)+",
    re.IGNORECASE,
)

HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n]+")
EXCESS_NEWLINES = re.compile(r"\n{3,}")
SENTENCE_END = re.compile(r"[.!?]+")
WHITESPACE = re.compile(r"\s")


# ======================================================================
# Stage actions
# ======================================================================

def truncate_forwarded_block(text: str) -> str:
    """Keep only the text preceding the first forwarded-message marker."""
    match = FORWARD_MARKER.search(text)
    return text if match is None else text[: match.start()]


def _attribution_span(lines: List[str], index: int) -> int:
    """Number of lines (0, 1 or 2) forming a reply attribution at *index*."""
    line = lines[index]
    if REPLY_ATTRIBUTION.fullmatch(line):
        return 1
    if (
        index + 1 < len(lines)
        and REPLY_ATTRIBUTION_START.fullmatch(line)
        and REPLY_ATTRIBUTION_END.fullmatch(lines[index + 1])
    ):
        return 2
    return 0


def truncate_reply_attribution(text: str) -> str:
    """
    Drop the first reply attribution and everything after it.

    An attribution that precedes any content (the client put the new text
    below it) is dropped on its own and scanning continues.
    """
    lines = text.split("\n")
    kept: List[str] = []
    seen_content = False
    index = 0
    while index < len(lines):
        span = _attribution_span(lines, index)
        if span:
            if seen_content:
                break
            index += span
            continue
        kept.append(lines[index])
        seen_content = seen_content or bool(lines[index].strip())
        index += 1
    return "\n".join(kept)


def strip_leading_headers(text: str) -> str:
    """Drop RFC 822 style header lines (and their folded continuations) at the top."""
    lines = text.split("\n")
    index = 0
    in_header = False
    while index < len(lines):
        line = lines[index]
        if HEADER_LINE.fullmatch(line):
            in_header = True
        elif in_header and line[:1] in (" ", "\t") and line.strip():
            pass                                    # folded header continuation
        elif not line.strip():
            pass
        else:
            break
        index += 1
    if not in_header:
        return text
    return "\n".join(lines[index:])


def _signature_start(lines: List[str]) -> Optional[int]:
    seen_content = False
    for index, line in enumerate(lines):
        if SIGNATURE_DELIMITER.fullmatch(line) or DEVICE_SIGNATURE.fullmatch(line):
            return index
        # a bare "Thanks!" is the message, not a sign-off
        if seen_content and CLOSING_SALUTATION.fullmatch(line):
            return index
        seen_content = seen_content or bool(line.strip())
    return None


def truncate_signature(text: str) -> str:
    """Drop the signature delimiter, salutation or device marker line and everything after it."""
    lines = text.split("\n")
    start = _signature_start(lines)
    return text if start is None else "\n".join(lines[:start])


def drop_quoted_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if not QUOTED_LINE.fullmatch(line))


def strip_subject_prefixes(text: str) -> str:
    return SUBJECT_PREFIX.sub("", text, count=1)


def normalize_whitespace(text: str) -> str:
    lines = [HORIZONTAL_WHITESPACE.sub(" ", line).strip() for line in text.split("\n")]
    return EXCESS_NEWLINES.sub("\n\n", "\n".join(lines)).strip()


def bound_length(text: str, max_length: int) -> str:
    """
    Cut *text* to fit *max_length*.

    Policy: text within the bound is returned unchanged. Otherwise, keep the
    longest prefix ending at a sentence end (``.``, ``!``, ``?`` followed by
    whitespace) that is at least half the budget; failing that, cut at the
    last whitespace in the second half of the budget and append an ellipsis;
    failing that, cut hard and append an ellipsis. A truncated result is
    always strictly shorter than *max_length*.
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS) + 1:
        return text[: max(max_length - 1, 0)]

    limit = max_length - 1 - len(ELLIPSIS)
    head = text[:limit]
    floor = limit // 2

    cut = None
    for match in SENTENCE_END.finditer(head):
        end = match.end()
        if end >= floor and end < len(text) and text[end].isspace():
            cut = end
    if cut is not None:
        return head[:cut]

    last_space = None
    for match in WHITESPACE.finditer(head):
        last_space = match.start()
    if last_space is not None and last_space >= floor:
        return head[:last_space].rstrip() + ELLIPSIS
    return head.rstrip() + ELLIPSIS


# ======================================================================
# Stage table (order matters)
# ======================================================================

PREVIEW_RULES: List[RewriteRule] = [
    RewriteRule(
        name="truncate_forwarded_block",
        rewrite=truncate_forwarded_block,
        pattern=FORWARD_MARKER,
        rationale="Everything below a forward banner is an older message.",
    ),
    RewriteRule(
        name="truncate_reply_attribution",
        rewrite=truncate_reply_attribution,
        pattern=REPLY_ATTRIBUTION,
        rationale="An 'On ... wrote:' line introduces the quoted thread.",
    ),
    RewriteRule(
        name="strip_leading_headers",
        rewrite=strip_leading_headers,
        pattern=HEADER_LINE,
        rationale="Header blocks at the top are metadata, not content.",
    ),
    RewriteRule(
        name="truncate_signature",
        rewrite=truncate_signature,
        pattern=CLOSING_SALUTATION,
        rationale="Sign-offs, '--' delimiters and 'Sent from my ...' carry no new information.",
    ),
    RewriteRule(
        name="drop_quoted_lines",
        rewrite=drop_quoted_lines,
        pattern=QUOTED_LINE,
        rationale="Residual '>' / '|' fragments are quoted from earlier messages.",
    ),
    RewriteRule(
        name="strip_subject_prefixes",
        rewrite=strip_subject_prefixes,
        pattern=SUBJECT_PREFIX,
        rationale="Leading Fwd:/Re: clutter hides the first real words.",
    ),
    RewriteRule(
        name="normalize_whitespace",
        rewrite=normalize_whitespace,
        pattern=HORIZONTAL_WHITESPACE,
        rationale="List rows need single spaces and at most one blank line.",
    ),
]
