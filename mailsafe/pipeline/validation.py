"""
Validation — batch record validation before display processing.

Implements:
- JSON parsing (records may arrive as raw JSON strings)
- Schema conformance (jsonschema, MESSAGE_INPUT_SCHEMA)
- MessageIn contract (pydantic: normalization, body requirement)
- Quality warnings (empty bodies, oversized bodies)
"""
import json
import logging
from typing import Any, List

from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate
from pydantic import ValidationError

from mailsafe.config.schemas import DISPLAY_OUTPUT_SCHEMA, MESSAGE_INPUT_SCHEMA
from mailsafe.models.display_io import MessageIn
from mailsafe.models.email_document import EmailDocument
from mailsafe.models.validation import ValidationResult

logger = logging.getLogger(__name__)

# Bodies above this size are processed but flagged; collaborators rarely
# pass more than ~1 MB.
LARGE_BODY_CHARS: int = 1_000_000


def _error_path(path) -> str:
    return ".".join(str(p) for p in path) or "record"


def validate_message_payload(payload: Any) -> ValidationResult:
    """
    Validate one raw batch record.

    Stages:
        1. Parse JSON (dicts pass through)
        2. Schema conformance
        3. MessageIn contract (message_id normalized, at least one body part)
        4. Quality warnings

    Returns:
        ValidationResult with the normalized payload in ``data`` on success.
    """
    warnings: List[str] = []

    # ------------------------------------------------------------------
    # Stage 1: Parse JSON
    # ------------------------------------------------------------------
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            return ValidationResult(valid=False, errors=[f"Invalid JSON: {e}"])

    if not isinstance(payload, dict):
        return ValidationResult(
            valid=False,
            errors=[f"Record must be an object, got {type(payload).__name__}"],
        )

    message_id = payload.get("message_id")
    if not isinstance(message_id, str):
        message_id = None

    # ------------------------------------------------------------------
    # Stage 2: Schema validation
    # ------------------------------------------------------------------
    try:
        validate(instance=payload, schema=MESSAGE_INPUT_SCHEMA)
    except SchemaValidationError as e:
        return ValidationResult(
            valid=False,
            message_id=message_id,
            errors=[f"{_error_path(e.path)}: Schema violation: {e.message}"],
        )

    # ------------------------------------------------------------------
    # Stage 3: Contract
    # ------------------------------------------------------------------
    try:
        message = MessageIn.model_validate(payload)
    except ValidationError as e:
        errors = [f"{_error_path(err['loc'])}: {err['msg']}" for err in e.errors()]
        return ValidationResult(valid=False, message_id=message_id, errors=errors)

    # ------------------------------------------------------------------
    # Stage 4: Quality checks
    # ------------------------------------------------------------------
    for part in ("body_text", "body_html"):
        value = getattr(message, part)
        if value is not None and not value.strip():
            warnings.append(f"{part} is empty")
        if value is not None and len(value) > LARGE_BODY_CHARS:
            warnings.append(f"{part} is unusually large ({len(value)} chars)")

    return ValidationResult(
        valid=True,
        message_id=message.message_id,
        warnings=warnings,
        data=message.model_dump(),
    )


def validate_display_output(output: dict) -> List[str]:
    """Check a pipeline result against DISPLAY_OUTPUT_SCHEMA; returns the violations."""
    try:
        validate(instance=output, schema=DISPLAY_OUTPUT_SCHEMA)
    except SchemaValidationError as e:
        logger.error("Display output for %s violates schema: %s", output.get("message_id"), e.message)
        return [f"{_error_path(e.path)}: Schema violation: {e.message}"]
    return []


def to_email_document(data: dict) -> EmailDocument:
    """Build an EmailDocument from a validated payload."""
    return EmailDocument(
        message_id=data["message_id"],
        from_raw=data.get("from_raw", ""),
        subject=data.get("subject", ""),
        body_text=data.get("body_text"),
        body_html=data.get("body_html"),
    )
