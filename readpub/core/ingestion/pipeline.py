"""End-to-end URL to e-book pipeline orchestrator."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog

from readpub.core.ingestion.artifact_writer import ArtifactWriter
from readpub.core.ingestion.content_extractor import ContentExtractor
from readpub.core.ingestion.ebook_generator import EbookGenerator
from readpub.core.ingestion.fetcher import ContentFetcher, FetchSession, FetchStrategy
from readpub.core.ingestion.identity import derive_identity
from readpub.core.ingestion.workspace import Workspace

logger = structlog.get_logger(__name__)


class DocumentStatus(str, Enum):
    """Outcome of processing one URL."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DocumentResult:
    """Outcome of one URL."""

    url: str
    status: DocumentStatus
    identity: str | None = None
    output_path: Path | None = None
    error: str | None = None


@dataclass
class BatchResult:
    """Outcomes of a batch run, in input order."""

    results: list[DocumentResult] = field(default_factory=list)

    def _count(self, status: DocumentStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def completed(self) -> int:
        return self._count(DocumentStatus.COMPLETED)

    @property
    def skipped(self) -> int:
        return self._count(DocumentStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(DocumentStatus.FAILED)


class PipelineDriver:
    """
    Sequence the ingestion stages for each URL.

    Stages:
    1. Identity derivation (derive_identity)
    2. Workspace creation (Workspace.ensure)
    3. Raw content fetch, skipped when cached (ContentFetcher)
    4. Article extraction (ContentExtractor)
    5. Artifact writing (ArtifactWriter)
    6. E-book conversion (EbookGenerator)

    URLs are processed one after another. A failing URL is logged and
    recorded, and the batch moves on. The fetch session is released once,
    after the last URL.
    """

    def __init__(
        self,
        strategy: FetchStrategy,
        workspace: Workspace | None = None,
        fetcher: ContentFetcher | None = None,
        extractor: ContentExtractor | None = None,
        writer: ArtifactWriter | None = None,
        generator: EbookGenerator | None = None,
    ) -> None:
        self.strategy = strategy
        self.workspace = workspace or Workspace()
        self.fetcher = fetcher or ContentFetcher()
        self.extractor = extractor or ContentExtractor()
        self.writer = writer or ArtifactWriter()
        self.generator = generator or EbookGenerator(self.workspace)

    async def run(self, url: str, session: FetchSession) -> DocumentResult:
        """
        Process a single URL.

        Args:
            url: Article URL
            session: Open fetch session shared by the batch

        Returns:
            DocumentResult with status COMPLETED or SKIPPED

        Raises:
            InvalidUrlError: If no identity can be derived from the URL
            StorageError: If the workspace cannot be written
            FetchError: If raw content is not cached and cannot be fetched
            ConversionError: If the converter fails
        """
        logger.info("document_started", url=url)

        identity = derive_identity(url)
        document = self.workspace.ensure(identity)

        raw = await self.fetcher.fetch(url, document, session)

        record = self.extractor.extract(raw, url)
        if record is None:
            logger.info("document_skipped", url=url, identity=identity)
            return DocumentResult(url=url, status=DocumentStatus.SKIPPED, identity=identity)

        self.writer.write_content(document, url, record)
        self.writer.write_metadata(document, record)

        completion = self.generator.generate(document)

        logger.info(
            "document_completed",
            url=url,
            identity=identity,
            output_path=str(completion.output_path),
        )
        return DocumentResult(
            url=url,
            status=DocumentStatus.COMPLETED,
            identity=identity,
            output_path=completion.output_path,
        )

    async def run_batch(self, urls: Iterable[str]) -> BatchResult:
        """
        Process URLs sequentially, continuing past failures.

        Args:
            urls: Article URLs in processing order

        Returns:
            BatchResult with one DocumentResult per URL
        """
        batch = BatchResult()

        async with FetchSession(self.strategy) as session:
            logger.info("pipeline_started", strategy=self.strategy.name)

            for url in urls:
                try:
                    result = await self.run(url, session)
                except Exception as e:
                    logger.error(
                        "document_failed",
                        url=url,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    result = DocumentResult(
                        url=url,
                        status=DocumentStatus.FAILED,
                        error=f"{type(e).__name__}: {e}",
                    )
                batch.results.append(result)

        logger.info(
            "pipeline_finished",
            completed=batch.completed,
            skipped=batch.skipped,
            failed=batch.failed,
        )
        return batch
