"""
Environment settings loaded from .env file.

The sanitizer and preview functions never read these directly; callers pass
the values in as plain parameters.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Privacy ---
MAX_BODY_LOG_CHARS: int = int(os.getenv("MAX_BODY_LOG_CHARS", "80"))

# --- Preview ---
PREVIEW_MAX_LENGTH: int = int(os.getenv("PREVIEW_MAX_LENGTH", "200"))
PREVIEW_SCAN_LIMIT: int = int(os.getenv("PREVIEW_SCAN_LIMIT", "100000"))
SNIPPET_MAX_LENGTH: int = int(os.getenv("SNIPPET_MAX_LENGTH", "140"))

# --- Sanitizer ---
SANITIZE_MAX_ROUNDS: int = int(os.getenv("SANITIZE_MAX_ROUNDS", "4"))
BLOCK_REMOTE_IMAGES: bool = os.getenv("BLOCK_REMOTE_IMAGES", "true").lower() == "true"

# --- Batch runner ---
INPUT_FILE: str = os.getenv("INPUT_FILE", "io/messages.json")
OUTPUT_FILE: str = os.getenv("OUTPUT_FILE", "io/display_result.json")
