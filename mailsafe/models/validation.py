"""
ValidationResult — outcome of validating one raw batch record.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ValidationResult:
    """Result of validating a raw message payload against the MessageIn contract."""

    valid: bool
    message_id: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data: Optional[dict] = None                 # Normalized payload (populated on success)

    def to_rejection(self) -> dict:
        """Entry for the batch output's ``rejected`` list."""
        return {
            "message_id": self.message_id,
            "errors": list(self.errors),
        }
