"""Content extraction module - turn raw HTML into a readable article record."""

from dataclasses import asdict, dataclass
from typing import Any

import structlog
from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable
from trafilatura.metadata import extract_metadata

from readpub.config import settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExtractionRecord:
    """Readable article extracted from a page.

    Only ``content``, ``text_content`` and ``length`` are always present;
    every other field is None when the page does not provide it.
    """

    content: str
    text_content: str
    length: int
    title: str | None = None
    byline: str | None = None
    excerpt: str | None = None
    lang: str | None = None
    published_time: str | None = None
    dir: str | None = None
    site_name: str | None = None

    def raw_metadata(self) -> dict[str, Any]:
        """All fields except the article body and its text."""
        fields = asdict(self)
        del fields["content"]
        del fields["text_content"]
        return fields


class ContentExtractor:
    """Extract the article body and metadata from raw HTML.

    The body comes from readability (Mozilla's Readability algorithm), the
    metadata (author, date, description, site name) from trafilatura.
    """

    def __init__(self, min_text_length: int | None = None) -> None:
        """
        Initialize content extractor.

        Args:
            min_text_length: Minimum article text length (defaults to settings.min_text_length)
        """
        self.min_text_length = (
            min_text_length if min_text_length is not None else settings.min_text_length
        )

    def extract(self, raw: bytes | str, url: str) -> ExtractionRecord | None:
        """Extract a readable article from *raw*.

        Args:
            raw: Raw page content
            url: Page URL, used to resolve relative links

        Returns:
            ExtractionRecord, or None if the page holds no readable article
        """
        if not raw or not raw.strip():
            logger.info("extraction_empty", url=url, reason="empty_document")
            return None

        try:
            document = Document(raw, url=url)
            content = document.summary(html_partial=True)
        except Unparseable as e:
            logger.info("extraction_empty", url=url, reason="unparseable", error=str(e))
            return None

        body = BeautifulSoup(content, "html.parser")
        text = body.get_text(separator=" ", strip=True)
        if len(text) < self.min_text_length:
            logger.info(
                "extraction_empty",
                url=url,
                reason="too_short",
                text_length=len(text),
                min_text_length=self.min_text_length,
            )
            return None

        page = BeautifulSoup(raw, "html.parser")
        metadata = extract_metadata(raw, default_url=url)

        title = (metadata.title if metadata else None) or document.short_title()
        excerpt = (metadata.description if metadata else None) or self._first_paragraph(body)

        record = ExtractionRecord(
            content=content,
            text_content=text,
            length=len(text),
            title=_clean(title),
            byline=_clean(metadata.author if metadata else None),
            excerpt=_clean(excerpt),
            lang=self._html_attribute(page, "lang"),
            published_time=_clean(metadata.date if metadata else None),
            dir=self._html_attribute(page, "dir"),
            site_name=_clean(metadata.sitename if metadata else None),
        )

        logger.info(
            "extraction_complete",
            url=url,
            title=record.title,
            text_length=record.length,
        )
        return record

    def _html_attribute(self, page: BeautifulSoup, name: str) -> str | None:
        html = page.find("html")
        value = html.get(name) if html else None
        if isinstance(value, list):
            value = " ".join(value)
        return _clean(value)

    def _first_paragraph(self, body: BeautifulSoup) -> str | None:
        paragraph = body.find("p")
        return paragraph.get_text(" ", strip=True) if paragraph else None


def _clean(value: str | None) -> str | None:
    """Strip *value*, mapping blank strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
