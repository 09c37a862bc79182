"""URL to e-book ingestion pipeline.

This package provides:
- Document identity derivation and per-document workspaces
- Raw content fetching, directly or through a browser profile
- Readable article extraction (readability + trafilatura)
- Artifact writing and pandoc conversion
- Sequential batch orchestration
"""

from readpub.core.ingestion.artifact_writer import ArtifactWriter
from readpub.core.ingestion.content_extractor import ContentExtractor, ExtractionRecord
from readpub.core.ingestion.ebook_generator import Completion, EbookGenerator
from readpub.core.ingestion.fetcher import (
    BrowserProfileStrategy,
    ContentFetcher,
    DirectFetchStrategy,
    FetchSession,
    FetchStrategy,
)
from readpub.core.ingestion.identity import derive_identity
from readpub.core.ingestion.pipeline import (
    BatchResult,
    DocumentResult,
    DocumentStatus,
    PipelineDriver,
)
from readpub.core.ingestion.workspace import Artifact, DocumentWorkspace, Workspace

__all__ = [
    "Artifact",
    "ArtifactWriter",
    "BatchResult",
    "BrowserProfileStrategy",
    "Completion",
    "ContentExtractor",
    "ContentFetcher",
    "DirectFetchStrategy",
    "DocumentResult",
    "DocumentStatus",
    "DocumentWorkspace",
    "EbookGenerator",
    "ExtractionRecord",
    "FetchSession",
    "FetchStrategy",
    "PipelineDriver",
    "Workspace",
    "derive_identity",
]
