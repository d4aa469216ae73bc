"""
PipelineVersion — frozen dataclass for reproducible display output.

Every processed message carries the full PipelineVersion so a cached preview
or sanitized body can be invalidated when the rule tables change.
"""
from dataclasses import dataclass

from mailsafe.config.constants import PREVIEW_PARSER_VERSION, SANITIZER_VERSION


@dataclass(frozen=True)
class PipelineVersion:
    """Versions of every rule table that shaped an output."""

    sanitizerversion: str = SANITIZER_VERSION
    previewversion: str = PREVIEW_PARSER_VERSION
    schemaversion: str = "display-output-v1"

    def to_dict(self) -> dict:
        return {
            "sanitizerversion": self.sanitizerversion,
            "previewversion": self.previewversion,
            "schemaversion": self.schemaversion,
        }

    def __repr__(self) -> str:
        return f"Pipeline-{self.sanitizerversion}-{self.previewversion}"
