"""
Display Pipeline — prepares one message for the list and detail views.

Executes the 4-stage flow:
    1. Sanitize the HTML body (rule report kept for diagnostics)
    2. Block remote images (when the caller's account setting asks for it)
    3. Preview extraction from the text body, or from a plaintext
       projection of the sanitized HTML when there is no text body
    4. Subject and snippet normalization

The sanitizer and the preview extractor never call each other; this module
is the only place where both run for the same message.
"""
import logging
import time
from typing import List, Optional

from mailsafe.config.constants import (
    DEFAULT_PREVIEW_SCAN_LIMIT,
    DEFAULT_SANITIZE_ROUNDS,
    MAX_PREVIEW_LENGTH,
    MAX_SNIPPET_LENGTH,
)
from mailsafe.models.display_io import DisplayContent, DisplayDiagnostics, DisplayOutput
from mailsafe.models.email_document import EmailDocument
from mailsafe.models.pipeline_version import PipelineVersion
from mailsafe.pipeline.html_text import html_to_text
from mailsafe.pipeline.metrics import record_rule_hits, record_sanitizer_fallback, timed_component
from mailsafe.preview.display_normalizer import (
    normalize_snippet_for_display,
    normalize_subject_for_display,
)
from mailsafe.preview.preview_extractor import extract_preview_with_report
from mailsafe.sanitizer.html_sanitizer import block_images, sanitize_with_report

logger = logging.getLogger(__name__)


def prepare_message_for_display(
    document: EmailDocument,
    pipeline_version: Optional[PipelineVersion] = None,
    block_remote_images: bool = True,
    preview_max_length: int = MAX_PREVIEW_LENGTH,
    preview_scan_limit: int = DEFAULT_PREVIEW_SCAN_LIMIT,
    snippet_max_length: int = MAX_SNIPPET_LENGTH,
    sanitize_max_rounds: int = DEFAULT_SANITIZE_ROUNDS,
) -> dict:
    """
    Main display pipeline.

    Args:
        document: Message with at least one body part.
        pipeline_version: PipelineVersion for traceability. Defaults to current.
        block_remote_images: Account-scoped image blocking preference.
        preview_max_length: Preview budget in characters.
        preview_scan_limit: Hard cap on preview input scanning.
        snippet_max_length: Single-line snippet budget.
        sanitize_max_rounds: Fixed-point bound for the sanitizer.

    Returns:
        Output dict conforming to DisplayOutput.

    Raises:
        ValueError: if the document has neither a text nor an HTML body.
    """
    start_time = time.monotonic()

    if pipeline_version is None:
        pipeline_version = PipelineVersion()

    if document.body_text is None and document.body_html is None:
        logger.error("Message %s has no body part", document.message_id)
        raise ValueError(f"Message {document.message_id} has neither body_text nor body_html")

    warnings: List[str] = []
    sanitizer_rules: List[str] = []
    fallback_applied = False
    safe_html: Optional[str] = None

    # ==================================================================
    # Stage 1: Sanitize
    # ==================================================================
    if document.body_html is not None:
        with timed_component("sanitizer"):
            report = sanitize_with_report(document.body_html, max_rounds=sanitize_max_rounds)
        safe_html = report.text
        sanitizer_rules = report.rules_applied
        record_rule_hits("sanitizer", sanitizer_rules)

        if report.fallback_applied:
            fallback_applied = True
            record_sanitizer_fallback()
            warnings.append(
                f"Sanitizer fell back to escaping after {report.rounds} rounds"
            )
        if sanitizer_rules:
            logger.info(
                "Message %s: sanitizer applied %s",
                document.message_id,
                ", ".join(sanitizer_rules),
            )

    # ==================================================================
    # Stage 2: Remote image blocking
    # ==================================================================
    images_blocked = 0
    if safe_html is not None and block_remote_images:
        with timed_component("image_blocking"):
            blocked_html = block_images(safe_html)
        images_blocked = blocked_html.count('data-blocked-src') - safe_html.count('data-blocked-src')
        safe_html = blocked_html

    # ==================================================================
    # Stage 3: Preview
    # ==================================================================
    if document.body_text is not None and document.body_text.strip():
        preview_origin = "text"
        preview_source = document.body_text
    elif safe_html is not None:
        preview_origin = "html"
        preview_source = html_to_text(safe_html)
    else:
        preview_origin = "none"
        preview_source = ""
        warnings.append("No usable body for preview")

    with timed_component("preview"):
        preview_report = extract_preview_with_report(
            preview_source,
            max_length=preview_max_length,
            scan_limit=preview_scan_limit,
        )
    record_rule_hits("preview", preview_report.rules_applied)

    if preview_source.strip() and not preview_report.text:
        warnings.append("Preview stages consumed all content")

    # ==================================================================
    # Stage 4: Subject & snippet
    # ==================================================================
    subject = normalize_subject_for_display(document.subject)
    snippet = normalize_snippet_for_display(preview_source, max_length=snippet_max_length)

    # ==================================================================
    # Assembly
    # ==================================================================
    elapsed_ms = int((time.monotonic() - start_time) * 1000)

    output = DisplayOutput(
        message_id=document.message_id,
        pipeline_version=pipeline_version.to_dict(),
        display=DisplayContent(
            html=safe_html,
            preview=preview_report.text,
            snippet=snippet,
            subject=subject,
        ),
        diagnostics=DisplayDiagnostics(
            rules_applied=sanitizer_rules,
            preview_rules_applied=preview_report.rules_applied,
            warnings=warnings,
            fallback_applied=fallback_applied,
        ),
        processing_metadata={
            "display_duration_ms": elapsed_ms,
            "images_blocked": images_blocked,
            "preview_chars": len(preview_report.text),
            "preview_source": preview_origin,
        },
    )
    return output.model_dump()
