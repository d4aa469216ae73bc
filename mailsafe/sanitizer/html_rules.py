"""
HTML rewrite rules — ordered rule table for the sanitizer.

Rules (applied in this order):
    1. remove_script_elements
    2. strip_event_handlers
    3. neutralize_javascript_urls
    4. remove_iframe_elements
    5. remove_object_elements / remove_embed_elements
    6. replace_form_elements

Every pattern is linear in the input: element patterns stop at the first
closing tag or at end of input, the quote-aware tag region can consume
any character except an unquoted '>', so it always ends at '>' or end of
input and never fails after a long scan, and attribute matches only start
where a separator run starts. Unterminated constructs run to end
of input, so malformed markup is removed rather than passed through.
"""
import html as html_lib
import logging
import re
from re import Match, Pattern
from typing import Callable, List

from mailsafe.config.constants import BLOCKED_FORM_HTML, BLOCKED_SCHEME
from mailsafe.models.rewrite import RewriteRule

logger = logging.getLogger(__name__)

AttributeTransform = Callable[[str, Match[str]], str]


# ======================================================================
# Tag & attribute scanning
# ======================================================================

# A quote opens a value only right after '='; elsewhere it is an ordinary
# character, so the region ends at the same '>' a browser would end the tag.
_ATTRS_REGION = (
    r"""(?P<attrs>(?:[^>"'=]|=\s*"[^"]*(?:"|\Z)|=\s*'[^']*(?:'|\Z)|=\s*[^\s>]*|["'])*)"""
    r"""(?P<end>>|\Z)"""
)


def start_tag_pattern(name: str = r"[a-zA-Z][^\s/>]*") -> Pattern[str]:
    """
    Build a start-tag pattern for tag names matching *name*.

    Groups: ``name``, ``attrs`` (everything up to the closing ``>``, quoted
    values may contain ``>``), ``end`` (``>`` or empty at end of input).
    """
    return re.compile(
        rf"""<(?P<name>{name})(?=[\s/>]|\Z){_ATTRS_REGION}""",
        re.IGNORECASE,
    )


START_TAG: Pattern[str] = start_tag_pattern()

# A match starts only where a separator run starts.
ATTRIBUTE: Pattern[str] = re.compile(
    r"""(?<![\s/])(?P<lead>[\s/]*)(?P<name>[^\s/>=]+)"""
    r"""(?:(?P<assign>\s*=\s*)(?P<value>"[^"]*"?|'[^']*'?|[^\s"'>][^\s>]*))?"""
)


def rewrite_attributes(
    html: str,
    transform: AttributeTransform,
    tag_pattern: Pattern[str] = START_TAG,
) -> str:
    """
    Apply *transform(tag_name, attribute_match)* to every attribute of every
    start tag matched by *tag_pattern*.

    The transform returns the replacement text for the whole attribute
    (leading whitespace included). Tags whose attributes are unchanged are
    emitted byte-for-byte.
    """

    def _rewrite_tag(tag: Match[str]) -> str:
        attrs = tag.group("attrs")
        if not attrs:
            return tag.group(0)
        tag_name = tag.group("name")
        new_attrs = ATTRIBUTE.sub(lambda attr: transform(tag_name, attr), attrs)
        if new_attrs == attrs:
            return tag.group(0)
        return f"<{tag_name}{new_attrs}{tag.group('end')}"

    return tag_pattern.sub(_rewrite_tag, html)


def attribute_text(attr: Match[str], name: str, value: str | None = None) -> str:
    """Re-serialize *attr* with a new name and (optionally) a new raw value."""
    if attr.group("value") is None and value is None:
        return f"{attr.group('lead')}{name}"
    assign = attr.group("assign") or "="
    return f"{attr.group('lead')}{name}{assign}{attr.group('value') if value is None else value}"


def drop_attribute(attr: Match[str]) -> str:
    """Remove *attr*, keeping a separator if the next attribute would fuse with the previous token."""
    following = attr.string[attr.end() : attr.end() + 1]
    if attr.group("lead") and following and not following.isspace() and following not in "/>":
        return " "
    return ""


def unquote(value: str | None) -> str:
    if not value:
        return ""
    if value[0] in "\"'":
        inner = value[1:]
        return inner[:-1] if inner.endswith(value[0]) else inner
    return value


# ======================================================================
# Element patterns
# ======================================================================

def _tag_boundary(tag: str) -> str:
    # <form-field> is a custom element, not <form>
    return rf"{tag}(?=[\s/>]|\Z)"


def element_pattern(tag: str, self_closing: bool = False) -> Pattern[str]:
    """
    Open tag through the first matching close tag (or end of input), or a
    stray close tag.

    With *self_closing*, ``<tag .../>`` is also a complete element. Leave it
    off for elements whose ``/>`` a browser ignores (script, object, form):
    there the open tag still runs to the close tag.
    """
    opening = _tag_boundary(tag)
    alternatives = []
    if self_closing:
        alternatives.append(rf"""<{opening}(?:[^>"']|"[^"]*"|'[^']*')*/\s*>""")
    alternatives.append(rf"""<{opening}.*?(?:</{tag}\s*>|\Z)""")
    alternatives.append(rf"""</{tag}\s*>""")
    return re.compile("|".join(alternatives), re.IGNORECASE | re.DOTALL)


def void_element_pattern(tag: str) -> Pattern[str]:
    """A single (void) tag, plus any stray close tag."""
    return re.compile(
        rf"""<{_tag_boundary(tag)}{_ATTRS_REGION}|</{tag}\s*>""",
        re.IGNORECASE,
    )


SCRIPT_ELEMENT = element_pattern("script")
IFRAME_ELEMENT = element_pattern("iframe", self_closing=True)
OBJECT_ELEMENT = element_pattern("object")
EMBED_ELEMENT = void_element_pattern("embed")
FORM_ELEMENT = element_pattern("form")

EVENT_HANDLER_NAME = re.compile(r"on[a-z]+", re.IGNORECASE)

# Whitespace tolerated around and inside the scheme token ("java script :").
JAVASCRIPT_SCHEME = re.compile(
    r"j\s*a\s*v\s*a\s*s\s*c\s*r\s*i\s*p\s*t\s*:",
    re.IGNORECASE,
)


# ======================================================================
# Rule actions
# ======================================================================

def remove_script_elements(html: str) -> str:
    return SCRIPT_ELEMENT.sub("", html)


def _drop_event_handler(tag_name: str, attr: Match[str]) -> str:
    if EVENT_HANDLER_NAME.fullmatch(attr.group("name")):
        logger.debug("Dropped <%s %s>", tag_name, attr.group("name"))
        return drop_attribute(attr)
    return attr.group(0)


def strip_event_handlers(html: str) -> str:
    return rewrite_attributes(html, _drop_event_handler)


def _neutralize_encoded_scheme(value: str) -> str:
    """Catch character-reference obfuscation such as ``&#106;avascript:``."""
    if "&" not in value:
        return value
    quote = value[0] if value[0] in "\"'" else '"'
    decoded = html_lib.unescape(unquote(value))
    match = JAVASCRIPT_SCHEME.search(decoded)
    if match is None:
        return value
    neutral = decoded[: match.start()] + BLOCKED_SCHEME + decoded[match.end() :]
    return f"{quote}{html_lib.escape(neutral, quote=True)}{quote}"


def _neutralize_scheme(tag_name: str, attr: Match[str]) -> str:
    value = attr.group("value")
    if not value:
        return attr.group(0)
    neutral = JAVASCRIPT_SCHEME.sub(BLOCKED_SCHEME, value)
    if neutral == value:
        neutral = _neutralize_encoded_scheme(value)
    if neutral == value:
        return attr.group(0)
    logger.debug("Neutralized javascript: scheme in <%s %s>", tag_name, attr.group("name"))
    return attribute_text(attr, attr.group("name"), neutral)


def neutralize_javascript_urls(html: str) -> str:
    return rewrite_attributes(html, _neutralize_scheme)


def remove_iframe_elements(html: str) -> str:
    return IFRAME_ELEMENT.sub("", html)


def remove_object_elements(html: str) -> str:
    return OBJECT_ELEMENT.sub("", html)


def remove_embed_elements(html: str) -> str:
    return EMBED_ELEMENT.sub("", html)


def _form_placeholder(match: Match[str]) -> str:
    # stray </form> is dropped, a real form becomes the placeholder
    return "" if match.group(0).startswith("</") else BLOCKED_FORM_HTML


def replace_form_elements(html: str) -> str:
    return FORM_ELEMENT.sub(_form_placeholder, html)


# ======================================================================
# Rule table (order matters)
# ======================================================================

SANITIZE_RULES: List[RewriteRule] = [
    RewriteRule(
        name="remove_script_elements",
        rewrite=remove_script_elements,
        pattern=SCRIPT_ELEMENT,
        rationale="Script elements execute as soon as the body is rendered.",
    ),
    RewriteRule(
        name="strip_event_handlers",
        rewrite=strip_event_handlers,
        pattern=EVENT_HANDLER_NAME,
        rationale="on* attributes bind script to DOM events (onerror, onload, ...).",
    ),
    RewriteRule(
        name="neutralize_javascript_urls",
        rewrite=neutralize_javascript_urls,
        pattern=JAVASCRIPT_SCHEME,
        rationale="javascript: URLs run script on navigation; the attribute stays but points at blocked:.",
    ),
    RewriteRule(
        name="remove_iframe_elements",
        rewrite=remove_iframe_elements,
        pattern=IFRAME_ELEMENT,
        rationale="Frames load arbitrary remote documents inside the message view.",
    ),
    RewriteRule(
        name="remove_object_elements",
        rewrite=remove_object_elements,
        pattern=OBJECT_ELEMENT,
        rationale="Plugin content (Flash, applets) is not renderable safely.",
    ),
    RewriteRule(
        name="remove_embed_elements",
        rewrite=remove_embed_elements,
        pattern=EMBED_ELEMENT,
        rationale="Plugin content (Flash, applets) is not renderable safely.",
    ),
    RewriteRule(
        name="replace_form_elements",
        rewrite=replace_form_elements,
        pattern=FORM_ELEMENT,
        rationale="Credential-phishing forms must neither render inputs nor submit.",
    ),
]
