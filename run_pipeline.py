"""
Batch runner for the display pipeline.

Reads:
  - io/messages.json           (list of MessageIn records, path from INPUT_FILE)

Produces:
  - io/display_result.json     ({"results": [...], "rejected": [...]}, path from OUTPUT_FILE)
"""
import json
import logging
import sys
from pathlib import Path

from mailsafe.config import settings

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("run_pipeline")

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT = Path(__file__).parent
INPUT_FILE = ROOT / settings.INPUT_FILE
OUTPUT_FILE = ROOT / settings.OUTPUT_FILE

# ---------------------------------------------------------------------------
# Load input
# ---------------------------------------------------------------------------
logger.info("Loading input from %s", INPUT_FILE)

with open(INPUT_FILE, encoding="utf-8") as f:
    records = json.load(f)

if isinstance(records, dict):
    records = records.get("messages", [])

logger.info("records           : %d", len(records))
logger.info("block images      : %s", settings.BLOCK_REMOTE_IMAGES)
logger.info("preview max chars : %d", settings.PREVIEW_MAX_LENGTH)

# ---------------------------------------------------------------------------
# Validation + display pipeline
# ---------------------------------------------------------------------------
from mailsafe.models.pipeline_version import PipelineVersion
from mailsafe.pipeline.display_pipeline import prepare_message_for_display
from mailsafe.pipeline.metrics import record_rejection
from mailsafe.pipeline.validation import (
    to_email_document,
    validate_display_output,
    validate_message_payload,
)

pipeline_version = PipelineVersion()
results = []
rejected = []

for index, record in enumerate(records):
    validation = validate_message_payload(record)
    if not validation.valid:
        logger.warning(
            "Record %d (%s) rejected: %s",
            index,
            validation.message_id or "no message_id",
            "; ".join(validation.errors),
        )
        record_rejection("validation")
        rejected.append(validation.to_rejection())
        continue

    for warning in validation.warnings:
        logger.warning("Record %d (%s): %s", index, validation.message_id, warning)

    document = to_email_document(validation.data)
    try:
        result = prepare_message_for_display(
            document,
            pipeline_version=pipeline_version,
            block_remote_images=settings.BLOCK_REMOTE_IMAGES,
            preview_max_length=settings.PREVIEW_MAX_LENGTH,
            preview_scan_limit=settings.PREVIEW_SCAN_LIMIT,
            snippet_max_length=settings.SNIPPET_MAX_LENGTH,
            sanitize_max_rounds=settings.SANITIZE_MAX_ROUNDS,
        )
    except ValueError as e:
        logger.warning("Record %d (%s) rejected: %s", index, document.message_id, e)
        record_rejection("pipeline")
        rejected.append({"message_id": document.message_id, "errors": [str(e)]})
        continue

    violations = validate_display_output(result)
    if violations:
        record_rejection("schema")
        rejected.append({"message_id": document.message_id, "errors": violations})
        continue

    logger.debug(
        "Record %d preview: %s",
        index,
        result["display"]["preview"][: settings.MAX_BODY_LOG_CHARS],
    )
    results.append(result)

logger.info("Processed %d records, rejected %d", len(results), len(rejected))

# ---------------------------------------------------------------------------
# Save output
# ---------------------------------------------------------------------------
OUTPUT_FILE.parent.mkdir(parents=True, exist_ok=True)
with open(OUTPUT_FILE, "w", encoding="utf-8") as f:
    json.dump({"results": results, "rejected": rejected}, f, ensure_ascii=False, indent=2)

logger.info("Output saved to: %s", OUTPUT_FILE)

# ---------------------------------------------------------------------------
# Print summary
# ---------------------------------------------------------------------------
print("\n" + "=" * 70)
print("DISPLAY PIPELINE RESULT — SUMMARY")
print("=" * 70)
print(f"pipeline    : {pipeline_version!r}")
print(f"processed   : {len(results)}")
print(f"rejected    : {len(rejected)}")

for result in results:
    diag = result["diagnostics"]
    rules = ", ".join(diag["rules_applied"]) or "-"
    print(f"\n  [{result['message_id']}]")
    print(f"    subject : {result['display']['subject']}")
    print(f"    snippet : {result['display']['snippet']}")
    print(f"    rules   : {rules}")
    if diag["fallback_applied"]:
        print("    fallback: document escaped")
    if diag["warnings"]:
        print(f"    warning : {diag['warnings']}")

for entry in rejected:
    print(f"\n  [rejected {entry['message_id']}] {entry['errors']}")

print("=" * 70)
print(f"Output: {OUTPUT_FILE}")
print("=" * 70 + "\n")
