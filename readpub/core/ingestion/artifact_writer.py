"""Persist an extraction record as converter-ready artifacts."""

from pathlib import Path
from typing import Any

import structlog
import yaml
from bs4 import BeautifulSoup

from readpub.config import settings
from readpub.core.ingestion.content_extractor import ExtractionRecord
from readpub.core.ingestion.workspace import Artifact, DocumentWorkspace

logger = structlog.get_logger(__name__)


class ArtifactWriter:
    """
    Write the extracted HTML and metadata files of a document.

    Produces:
    - extracted.html: excerpt heading, article body and a source link
    - metadata.yaml: author, title, date and lang for the converter
    - metadata-raw.yaml: every extracted field except the body (optional)
    """

    def __init__(self, write_raw_metadata: bool | None = None) -> None:
        self.write_raw = (
            write_raw_metadata
            if write_raw_metadata is not None
            else settings.write_raw_metadata
        )

    def build_content(self, url: str, record: ExtractionRecord) -> str:
        """Assemble the extracted HTML document."""
        soup = BeautifulSoup("", "html.parser")

        if record.excerpt:
            heading = soup.new_tag("h3")
            heading.string = record.excerpt
            soup.append(heading)

        if record.content:
            soup.append(BeautifulSoup(record.content, "html.parser"))

        source = soup.new_tag("p")
        source.append("Source: ")
        link = soup.new_tag("a", href=url)
        link.string = url
        source.append(link)
        soup.append(source)

        return str(soup)

    def build_metadata(self, record: ExtractionRecord) -> dict[str, Any]:
        """Converter metadata, leaving out fields the record does not have."""
        candidates = {
            "author": record.byline,
            "title": record.title,
            "date": record.published_time,
            "lang": record.lang,
        }
        return {key: value for key, value in candidates.items() if value}

    def write_content(
        self, document: DocumentWorkspace, url: str, record: ExtractionRecord
    ) -> Path:
        path = document.write(Artifact.EXTRACTED, self.build_content(url, record))
        logger.info("content_written", identity=document.identity, path=str(path))
        return path

    def write_metadata(self, document: DocumentWorkspace, record: ExtractionRecord) -> Path:
        metadata = self.build_metadata(record)
        path = document.write(Artifact.METADATA, _dump_yaml(metadata))
        logger.info(
            "metadata_written",
            identity=document.identity,
            fields=sorted(metadata),
        )

        if self.write_raw:
            self.write_raw_metadata(document, record)
        return path

    def write_raw_metadata(self, document: DocumentWorkspace, record: ExtractionRecord) -> Path:
        return document.write(Artifact.RAW_METADATA, _dump_yaml(record.raw_metadata()))


def _dump_yaml(data: dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
