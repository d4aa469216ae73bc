"""
Constants used across the sanitizer and preview extractor.
Versioned and pinned so callers can recognize sanitized artifacts.
"""
from typing import List

# =============================================================================
# Sanitizer tokens (stable: callers key UI affordances on them)
# =============================================================================
BLOCKED_SCHEME: str = "blocked:"

BLOCKED_FORM_HTML: str = (
    '<div class="blocked-form">This form was disabled for your security.</div>'
)

# 1x1 transparent GIF
PLACEHOLDER_IMAGE_SRC: str = (
    "data:image/gif;base64,R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"
)

BLOCKED_SRC_ATTRIBUTE: str = "data-blocked-src"

REMOTE_IMAGE_SCHEMES: List[str] = ["http://", "https://"]

# =============================================================================
# Preview vocabularies (English)
# =============================================================================
FORWARD_BANNER_PHRASES: List[str] = [
    "forwarded message",
    "original message",
    "forwarded",
]

CLOSING_SALUTATIONS: List[str] = [
    "best regards",
    "kind regards",
    "warm regards",
    "regards",
    "sincerely",
    "best",
    "thanks",
    "thank you",
    "cheers",
]

DEVICE_SIGNATURE_PREFIXES: List[str] = [
    "sent from my",
    "get outlook for",
    "download outlook",
]

LEADING_HEADER_NAMES: List[str] = [
    "from", "to", "subject", "date", "cc", "bcc", "sent",
]

SUBJECT_PREFIXES: List[str] = ["fwd", "fw", "re"]

TECHNICAL_HEADER_NAMES: List[str] = [
    "message-id", "content-type", "content-transfer-encoding",
    "mime-version", "return-path", "received", "dkim-signature",
    "authentication-results", "list-unsubscribe", "list-id",
    "precedence", "auto-submitted", "reply-to", "in-reply-to",
    "references",
]

# =============================================================================
# Bounds
# =============================================================================
DEFAULT_SANITIZE_ROUNDS: int = 4
DEFAULT_PREVIEW_SCAN_LIMIT: int = 100_000
MAX_PREVIEW_LENGTH: int = 200
MAX_SNIPPET_LENGTH: int = 140
ELLIPSIS: str = "…"

# =============================================================================
# Versions
# =============================================================================
SANITIZER_VERSION: str = "html-sanitizer-1.0.0"
PREVIEW_PARSER_VERSION: str = "preview-parser-1.0.0"
