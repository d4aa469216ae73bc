"""
EmailDocument — one message as handed over by the ingestion layer.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EmailDocument:
    """Raw message parts the display pipeline works on."""

    message_id: str
    from_raw: str
    subject: str
    body_text: Optional[str] = None                     # Plaintext part, if any
    body_html: Optional[str] = None                     # Untrusted HTML part, if any
