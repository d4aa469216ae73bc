"""
Unit tests for the preview extractor (full stage pipeline).
Tests: extract_meaningful_preview, extract_preview_with_report.
"""
import pytest

from mailsafe.preview.preview_extractor import (
    extract_meaningful_preview,
    extract_preview_with_report,
)


class TestForwardedMessages:

    def test_strip_forwarded_block_with_dashes(self):
        text = (
            "Here is my response to your question.\n"
            "\n"
            "---------- Forwarded message ---------\n"
            "From: John Doe <john@example.com>\n"
            "Date: Mon, Jan 1, 2024\n"
            "Subject: Original Subject"
        )
        result = extract_meaningful_preview(text)
        assert result == "Here is my response to your question."
        assert "Forwarded message" not in result
        assert "From:" not in result

    def test_begin_forwarded_message_consumes_everything(self):
        text = (
            "Begin forwarded message:\n"
            "From: Jane Smith\n"
            "To: Bob Johnson\n"
            "This is the forwarded content."
        )
        assert extract_meaningful_preview(text) == ""

    def test_original_message_banner(self):
        text = "Looping in Sam.\n\n-----Original Message-----\nFrom: Ann\nOld content"
        assert extract_meaningful_preview(text) == "Looping in Sam."

    def test_complex_forwarded_email(self, forwarded_text):
        result = extract_meaningful_preview(forwarded_text)
        assert result == "FYI - see below."
        assert "Q4 Report" not in result


class TestReplyAttribution:

    def test_leading_on_date_wrote_line_dropped(self):
        text = (
            "On Mon, Jan 1, 2024 at 3:00 PM John Doe <john@example.com> wrote:\n"
            "Thanks for your email. I'll review this tomorrow."
        )
        result = extract_meaningful_preview(text)
        assert "wrote:" not in result
        assert result == "Thanks for your email. I'll review this tomorrow."

    def test_short_attribution(self):
        result = extract_meaningful_preview("John Doe wrote:\nI agree with your proposal.")
        assert result == "I agree with your proposal."

    def test_attribution_after_content_truncates_thread(self):
        text = (
            "Yes, Thursday works.\n"
            "\n"
            "On Mon, Jan 1, 2024 at 3:00 PM John Doe <john@example.com> wrote:\n"
            "Can you do Thursday?\n"
            "Regards, John"
        )
        assert extract_meaningful_preview(text) == "Yes, Thursday works."

    def test_wrapped_attribution(self):
        text = (
            "Works for me.\n"
            "\n"
            "On Mon, Jan 1, 2024 at 3:00 PM John Doe <\n"
            "john@example.com> wrote:\n"
            "Old thread"
        )
        assert extract_meaningful_preview(text) == "Works for me."

    def test_complex_reply_with_quotes(self):
        text = (
            "On Tue, Jan 2, 2024 at 10:00 AM Jane Smith <jane@example.com> wrote:\n"
            "\n"
            "Yes, I can make it to the meeting on Thursday at 2pm.\n"
            "\n"
            "> On Mon, Jan 1, 2024 John Doe wrote:\n"
            "> Can you attend the meeting on Thursday?\n"
            ">\n"
            "> Best regards,\n"
            "> John"
        )
        result = extract_meaningful_preview(text)
        assert result == "Yes, I can make it to the meeting on Thursday at 2pm."

    def test_reply_thread_salutations_do_not_cut_current_message(self, reply_text):
        assert extract_meaningful_preview(reply_text) == (
            "Sounds good, I'll bring the slides on Thursday."
        )


class TestHeaderStripping:

    def test_leading_headers_removed(self):
        text = (
            "From: john@example.com\n"
            "To: jane@example.com\n"
            "Subject: Re: Meeting\n"
            "\n"
            "Let's schedule for Tuesday."
        )
        assert extract_meaningful_preview(text) == "Let's schedule for Tuesday."

    def test_header_like_line_in_body_kept(self):
        text = "Quick note.\nTo: everyone on the list, please RSVP."
        assert extract_meaningful_preview(text) == text


class TestSignatures:

    def test_rfc_delimiter(self):
        text = "Here is my message content.\n\n--\nJohn Doe\nCEO, Example Corp"
        assert extract_meaningful_preview(text) == "Here is my message content."

    def test_best_regards(self):
        result = extract_meaningful_preview(
            "I'll send you the report by Friday.\n\nBest regards,\nJohn"
        )
        assert "report by Friday" in result
        assert "Best regards" not in result

    def test_kind_regards(self):
        text = "Thank you for the update.\n\nKind regards,\nJane Smith\nSenior Manager"
        assert extract_meaningful_preview(text) == "Thank you for the update."

    def test_sent_from_device(self):
        text = "Sounds good, see you tomorrow.\n\nSent from my iPhone"
        assert extract_meaningful_preview(text) == "Sounds good, see you tomorrow."

    def test_signature_only_message_is_empty(self):
        text = "--\nJohn Doe\nCEO, Example Corp\njohn@example.com"
        assert extract_meaningful_preview(text) == ""

    def test_indented_delimiter(self):
        assert extract_meaningful_preview("Hello\n  -- \nsig") == "Hello"

    def test_bare_thanks_is_content(self):
        assert extract_meaningful_preview("Thanks!") == "Thanks!"

    def test_signature_and_forward(self):
        text = (
            "Please see the forwarded message below and let me know your thoughts.\n"
            "\n"
            "Thanks,\n"
            "Bob\n"
            "\n"
            "---------- Forwarded message ---------\n"
            "From: Alice\n"
            "Old message content here"
        )
        result = extract_meaningful_preview(text)
        assert result == "Please see the forwarded message below and let me know your thoughts."


class TestQuoteMarkers:

    def test_angle_quotes(self):
        text = "I agree with your point.\n\n> This is quoted text\n> that should be hidden."
        assert extract_meaningful_preview(text) == "I agree with your point."

    def test_pipe_quotes(self):
        text = "That's a great idea.\n\n| Previous message content\n| More quoted content"
        assert extract_meaningful_preview(text) == "That's a great idea."


class TestPrefixes:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Fwd: This is the actual message content", "This is the actual message content"),
            ("Re: Response to your question", "Response to your question"),
            ("FWD: re:  Fw: nested", "nested"),
        ],
    )
    def test_prefix_stripped(self, text, expected):
        assert extract_meaningful_preview(text) == expected


class TestWhitespaceAndBounds:

    def test_empty_and_whitespace_only(self):
        assert extract_meaningful_preview("") == ""
        assert extract_meaningful_preview("   \n\n   \t  ") == ""

    def test_short_message(self):
        assert extract_meaningful_preview("OK") == "OK"

    def test_collapse_spaces(self):
        assert extract_meaningful_preview("This   has    multiple     spaces") == "This has multiple spaces"

    def test_collapse_newlines(self):
        assert extract_meaningful_preview("Line 1\n\n\n\nLine 2") == "Line 1\n\nLine 2"

    def test_trim(self):
        assert extract_meaningful_preview("   Content with spaces   ") == "Content with spaces"

    def test_crlf_input(self):
        assert extract_meaningful_preview("Hello there.\r\n\r\nSent from my Pixel") == "Hello there."

    def test_short_text_with_sentences_unchanged(self):
        text = (
            "This is the first meaningful sentence. This is the second sentence. "
            "This is the third sentence that might be too long for a preview."
        )
        assert extract_meaningful_preview(text) == text

    def test_very_long_message_cut_at_sentence(self):
        text = "This is a very long message. " * 50
        result = extract_meaningful_preview(text)
        assert 0 < len(result) < 200
        assert result.endswith("message.")

    def test_long_unbroken_text_is_strictly_shorter(self):
        result = extract_meaningful_preview("a" * 5000)
        assert 0 < len(result) < 200
        assert result.endswith("…")

    def test_custom_max_length(self):
        result = extract_meaningful_preview("one two three four five six seven eight nine ten", max_length=20)
        assert len(result) < 20
        assert result.endswith("…")

    def test_scan_limit_bounds_work(self):
        text = "Visible start. " + "x" * 500_000
        result = extract_meaningful_preview(text, scan_limit=1000)
        assert result.startswith("Visible start.")
        assert len(result) < 200

    def test_newsletter_content(self):
        text = (
            "View this email in your browser\n"
            "\n"
            "Welcome to our weekly newsletter! Here are this week's top stories.\n"
            "\n"
            "Story 1: Important Update\n"
            "Story 2: New Feature Launch\n"
            "\n"
            "Unsubscribe | Manage Preferences"
        )
        result = extract_meaningful_preview(text)
        assert "weekly newsletter" in result
        assert len(result) <= 200


class TestPreviewReport:

    def test_stages_that_changed_text_are_reported(self):
        report = extract_preview_with_report("Re: Hello   there\n\n> quoted")
        assert report.text == "Hello there"
        assert report.rules_applied == [
            "drop_quoted_lines",
            "strip_subject_prefixes",
            "normalize_whitespace",
        ]

    def test_untouched_text_reports_nothing(self):
        report = extract_preview_with_report("Plain.")
        assert report.text == "Plain."
        assert report.rules_applied == []

    def test_bound_length_reported(self):
        report = extract_preview_with_report("word " * 100)
        assert "bound_length" in report.rules_applied
