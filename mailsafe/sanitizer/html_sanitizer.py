"""
HTML Sanitizer — neutralizes untrusted HTML email bodies before rendering.

Public API:
    sanitize(html)                      -> render-safe HTML
    sanitize_with_report(html)          -> RewriteResult (text + rules applied)
    block_images(html)                  -> remote <img> sources parked in data-blocked-src
    unblock_images(html)                -> inverse of block_images
    prepare_html_for_display(html, ...) -> sanitize + optional image blocking

All functions are total: they never raise and always return a string.
"""
import html as html_lib
import logging
from re import Match

from mailsafe.config.constants import (
    BLOCKED_SRC_ATTRIBUTE,
    DEFAULT_SANITIZE_ROUNDS,
    PLACEHOLDER_IMAGE_SRC,
    REMOTE_IMAGE_SCHEMES,
)
from mailsafe.models.rewrite import RewriteResult, apply_rules
from mailsafe.sanitizer.html_rules import (
    ATTRIBUTE,
    SANITIZE_RULES,
    attribute_text,
    drop_attribute,
    rewrite_attributes,
    start_tag_pattern,
    unquote,
)

logger = logging.getLogger(__name__)

IMG_TAG = start_tag_pattern("img")


# ======================================================================
# Sanitization
# ======================================================================

def sanitize_with_report(html: str, max_rounds: int = DEFAULT_SANITIZE_ROUNDS) -> RewriteResult:
    """
    Run the sanitizer rule table until the document stops changing.

    A removal can splice two fragments into a new trigger
    (``<scr<script></script>ipt>``), so the table is re-applied until a
    fixed point. If that takes more than *max_rounds* rounds the whole
    document is HTML-escaped and rendered as inert text.

    Returns:
        RewriteResult with the sanitized text, the distinct rules that fired
        (first-fired order), the number of rounds and the fallback flag.
    """
    if not html:
        return RewriteResult(text="", rounds=0)

    max_rounds = max(1, max_rounds)
    applied: list = []
    text = html

    for round_no in range(1, max_rounds + 1):
        result = apply_rules(SANITIZE_RULES, text)
        if not result.rules_applied:
            return RewriteResult(text=text, rules_applied=applied, rounds=round_no)
        applied.extend(name for name in result.rules_applied if name not in applied)
        text = result.text

    logger.warning(
        "Sanitizer did not reach a fixed point in %d rounds (%d chars), escaping document",
        max_rounds,
        len(html),
    )
    return RewriteResult(
        text=html_lib.escape(text, quote=False),
        rules_applied=applied,
        rounds=max_rounds,
        fallback_applied=True,
    )


def sanitize(html: str) -> str:
    """
    Rewrite an untrusted HTML string into a safe-to-render string.

    Removes scripts, event-handler attributes, frames and plugin content,
    neutralizes ``javascript:`` URLs to ``blocked:`` and replaces forms with
    a static ``<div class="blocked-form">`` placeholder. Everything else is
    preserved byte-for-byte. Idempotent.
    """
    return sanitize_with_report(html).text


# ======================================================================
# Remote image blocking
# ======================================================================

def _is_remote(value: str | None) -> bool:
    url = unquote(value).strip().lower()
    return any(url.startswith(scheme) for scheme in REMOTE_IMAGE_SCHEMES)


def _block_src(tag_name: str, attr: Match[str]) -> str:
    if attr.group("name").lower() != "src" or not _is_remote(attr.group("value")):
        return attr.group(0)
    parked = attribute_text(attr, BLOCKED_SRC_ATTRIBUTE)
    return f'{attr.group("lead")}src="{PLACEHOLDER_IMAGE_SRC}" {parked.lstrip()}'


def block_images(html: str) -> str:
    """
    Stop remote images (tracking pixels) from loading on render.

    For every ``<img>`` whose ``src`` is an ``http://`` or ``https://`` URL,
    the attribute is renamed to ``data-blocked-src`` (value kept verbatim)
    and a ``src`` pointing at an inline 1x1 transparent GIF is inserted in
    its place. All other attributes are left untouched and in order.
    """
    if not html:
        return ""
    return rewrite_attributes(html, _block_src, tag_pattern=IMG_TAG)


def unblock_images(html: str) -> str:
    """
    Restore images parked by block_images().

    On every ``<img>`` carrying ``data-blocked-src``, the placeholder ``src``
    is dropped and ``data-blocked-src`` is renamed back to ``src``.
    """
    if not html:
        return ""

    def _restore_tag(tag: Match[str]) -> str:
        attrs = tag.group("attrs")
        names = [a.group("name").lower() for a in ATTRIBUTE.finditer(attrs)]
        if BLOCKED_SRC_ATTRIBUTE not in names:
            return tag.group(0)

        def _restore(attr: Match[str]) -> str:
            name = attr.group("name").lower()
            if name == "src":
                return drop_attribute(attr)
            if name == BLOCKED_SRC_ATTRIBUTE:
                return attribute_text(attr, "src")
            return attr.group(0)

        return f"<{tag.group('name')}{ATTRIBUTE.sub(_restore, attrs)}{tag.group('end')}"

    return IMG_TAG.sub(_restore_tag, html)


def prepare_html_for_display(
    html: str,
    block_remote_images: bool = True,
    max_rounds: int = DEFAULT_SANITIZE_ROUNDS,
) -> str:
    """
    Sanitize *html* and, when the caller's account setting asks for it,
    block remote images.
    """
    safe = sanitize_with_report(html, max_rounds=max_rounds).text
    if block_remote_images:
        safe = block_images(safe)
    return safe
