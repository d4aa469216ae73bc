"""
JSON Schemas for the batch display contracts.

Two schemas:
1. MESSAGE_INPUT_SCHEMA   — one record exported by the ingestion/cache layer
2. DISPLAY_OUTPUT_SCHEMA  — one per-message result of the display pipeline

The pydantic models in mailsafe.models.display_io carry the same contracts
for Python callers; these schemas are what non-Python collaborators validate
against.
"""

# =============================================================================
# 1. Message input
# =============================================================================
MESSAGE_INPUT_SCHEMA: dict = {
    "type": "object",
    "required": ["message_id"],
    "properties": {
        "message_id": {"type": "string", "minLength": 1},
        "from_raw": {"type": "string"},
        "subject": {"type": "string"},
        "body_text": {"type": ["string", "null"]},
        "body_html": {"type": ["string", "null"]},
    },
}

# =============================================================================
# 2. Display output (schemaversion "display-output-v1")
# =============================================================================
DISPLAY_OUTPUT_SCHEMA: dict = {
    "type": "object",
    "required": ["message_id", "pipeline_version", "display", "diagnostics", "processing_metadata"],
    "properties": {
        "message_id": {"type": "string"},
        "pipeline_version": {
            "type": "object",
            "required": ["sanitizerversion", "previewversion", "schemaversion"],
        },
        "display": {
            "type": "object",
            "required": ["html", "preview", "snippet", "subject"],
            "properties": {
                "html": {"type": ["string", "null"]},
                "preview": {"type": "string"},
                "snippet": {"type": "string"},
                "subject": {"type": "string"},
            },
        },
        "diagnostics": {
            "type": "object",
            "required": ["rules_applied", "preview_rules_applied", "warnings", "fallback_applied"],
            "properties": {
                "rules_applied": {"type": "array", "items": {"type": "string"}},
                "preview_rules_applied": {"type": "array", "items": {"type": "string"}},
                "warnings": {"type": "array", "items": {"type": "string"}},
                "fallback_applied": {"type": "boolean"},
            },
        },
        "processing_metadata": {
            "type": "object",
            "required": ["display_duration_ms"],
            "properties": {
                "display_duration_ms": {"type": "integer", "minimum": 0},
            },
        },
    },
}
