"""
Unit tests for the plaintext projection of HTML bodies.
"""
from mailsafe.pipeline.html_text import html_to_text
from mailsafe.preview.preview_extractor import extract_meaningful_preview


class TestHtmlToText:

    def test_blocks_become_lines(self):
        text = html_to_text("<p>First paragraph.</p><p>Second <b>bold</b> one.</p>")
        assert "First paragraph." in text
        assert "Second" in text and "bold" in text

    def test_non_content_elements_dropped(self):
        html = (
            "<html><head><title>Title</title><style>p{}</style></head>"
            "<body><noscript>enable js</noscript><p>Body text</p></body></html>"
        )
        text = html_to_text(html)
        assert "Title" not in text
        assert "p{}" not in text
        assert "enable js" not in text
        assert "Body text" in text

    def test_br_is_newline(self):
        assert "line one\n" in html_to_text("line one<br>line two")

    def test_entities_decoded(self):
        assert "Fish & Chips" in html_to_text("<p>Fish &amp; Chips</p>")

    def test_empty(self):
        assert html_to_text("") == ""

    def test_projection_feeds_preview(self):
        html = (
            "<div>Lunch at noon works.</div>"
            "<div>--</div><div>Jane Smith</div><div>Director</div>"
        )
        assert extract_meaningful_preview(html_to_text(html)) == "Lunch at noon works."
