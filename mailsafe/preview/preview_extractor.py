"""
Preview Extractor — derives a short list preview from raw message text.

Pipeline:
    1. Forwarded-block truncation
    2. Reply-attribution truncation
    3. Leading header stripping
    4. Signature truncation
    5. Quote-marker filtering
    6. Fwd:/Re: prefix stripping
    7. Whitespace normalization
    8. Bounded extraction (sentence, then word boundary)

The function is total: empty, whitespace-only or fully consumed input
yields ``""``. Input beyond *scan_limit* characters is never looked at.
"""
import logging
from functools import partial

from mailsafe.config.constants import DEFAULT_PREVIEW_SCAN_LIMIT, MAX_PREVIEW_LENGTH
from mailsafe.models.rewrite import RewriteResult, RewriteRule, apply_rules
from mailsafe.preview.preview_rules import PREVIEW_RULES, bound_length

logger = logging.getLogger(__name__)


def extract_preview_with_report(
    text: str,
    max_length: int = MAX_PREVIEW_LENGTH,
    scan_limit: int = DEFAULT_PREVIEW_SCAN_LIMIT,
) -> RewriteResult:
    """
    Run the preview stage table over *text*.

    Args:
        text: Plaintext body (or a plaintext projection of an HTML body).
        max_length: Upper bound on the preview length.
        scan_limit: Hard cap on how much of *text* is scanned.

    Returns:
        RewriteResult with the preview and the names of the stages that
        changed the text.
    """
    if not text or not text.strip():
        return RewriteResult(text="", rounds=0)

    if len(text) > scan_limit:
        logger.debug("Preview input cut from %d to %d chars before scanning", len(text), scan_limit)
        text = text[:scan_limit]

    text = text.replace("\r\n", "\n").replace("\r", "\n")

    rules = PREVIEW_RULES + [
        RewriteRule(
            name="bound_length",
            rewrite=partial(bound_length, max_length=max_length),
            rationale="List rows have a fixed preview budget.",
        ),
    ]
    return apply_rules(rules, text)


def extract_meaningful_preview(
    text: str,
    max_length: int = MAX_PREVIEW_LENGTH,
    scan_limit: int = DEFAULT_PREVIEW_SCAN_LIMIT,
) -> str:
    """Return the human-written part of *text*, whitespace-normalized and bounded."""
    return extract_preview_with_report(text, max_length=max_length, scan_limit=scan_limit).text
