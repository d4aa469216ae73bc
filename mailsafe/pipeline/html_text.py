"""
Plaintext projection of an HTML body, used when a message has no text part.
"""
from bs4 import BeautifulSoup

# Elements whose text is never message content.
_NON_CONTENT_TAGS = ["script", "style", "head", "title", "noscript"]


def html_to_text(html: str) -> str:
    """
    Project *html* to plain text, one block per line.

    Run on already-sanitized HTML; the projection itself is not a
    sanitizer.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    return soup.get_text(separator="\n")
