"""
Typed Pydantic models for the batch display I/O contracts.

Covers the ingestion → display-pipeline interface (MessageIn) and the
per-message display output (DisplayOutput).
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Ingestion → display pipeline
# =============================================================================


class MessageIn(BaseModel):
    """
    One message record as exported by the ingestion/cache layer.

    At least one body part must be present; both are untrusted.
    """

    message_id: str = Field(..., min_length=1, description="RFC 822 Message-ID or provider id.")
    from_raw: str = Field("", description="Raw From header, e.g. 'Jane <jane@example.com>'.")
    subject: str = Field("", description="Raw subject, prefixes included.")
    body_text: Optional[str] = Field(None, description="Plaintext part, if the message has one.")
    body_html: Optional[str] = Field(None, description="HTML part, if the message has one.")

    @field_validator("message_id")
    @classmethod
    def strip_message_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message_id must not be blank")
        return v

    @model_validator(mode="after")
    def require_body(self) -> "MessageIn":
        if self.body_text is None and self.body_html is None:
            raise ValueError("message must carry body_text or body_html")
        return self


# =============================================================================
# Display pipeline output
# =============================================================================


class DisplayContent(BaseModel):
    """What the list and detail views render."""

    html: Optional[str] = Field(None, description="Sanitized (and optionally image-blocked) HTML.")
    preview: str = Field("", description="Bounded plain-text preview.")
    snippet: str = Field("", description="Single-line list snippet.")
    subject: str = Field("", description="Subject without Re:/Fwd: clutter.")


class DisplayDiagnostics(BaseModel):
    rules_applied: List[str] = Field(default_factory=list)
    preview_rules_applied: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    fallback_applied: bool = False


class DisplayOutput(BaseModel):
    """Full per-message result of prepare_message_for_display()."""

    message_id: str
    pipeline_version: dict
    display: DisplayContent
    diagnostics: DisplayDiagnostics
    processing_metadata: dict
