"""Per-document workspaces and the artifacts staged inside them."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from readpub.config import settings
from readpub.utils.exceptions import StorageError

logger = structlog.get_logger(__name__)


class Artifact(str, Enum):
    """Files staged in a document workspace."""

    RAW_CONTENT = "document-raw.html"
    EXTRACTED = "extracted.html"
    METADATA = "metadata.yaml"
    RAW_METADATA = "metadata-raw.yaml"


@dataclass(frozen=True)
class DocumentWorkspace:
    """Directory holding the staged artifacts of one document."""

    identity: str
    path: Path

    def path_for(self, artifact: Artifact) -> Path:
        """Return the location of *artifact* inside this workspace."""
        return self.path / artifact.value

    def exists(self, artifact: Artifact) -> bool:
        """Return True if *artifact* has been written."""
        return self.path_for(artifact).exists()

    def write(self, artifact: Artifact, data: bytes | str) -> Path:
        """
        Write *artifact*, replacing any previous content.

        Args:
            artifact: Artifact to write
            data: Raw bytes, or text to be stored as UTF-8

        Returns:
            Path of the written file

        Raises:
            StorageError: If the file cannot be written
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        target = self.path_for(artifact)
        try:
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Cannot write {target}: {e}") from e

        logger.debug(
            "artifact_written",
            identity=self.identity,
            artifact=artifact.value,
            size_bytes=len(data),
        )
        return target

    def read(self, artifact: Artifact) -> bytes:
        """
        Read *artifact*.

        Raises:
            StorageError: If the file is missing or unreadable
        """
        source = self.path_for(artifact)
        try:
            return source.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read {source}: {e}") from e


class Workspace:
    """
    Owns the workspace root and the shared output directory.

    Layout:
        <workspaces_dir>/<identity>/document-raw.html
        <workspaces_dir>/<identity>/extracted.html
        <workspaces_dir>/<identity>/metadata.yaml
        <workspaces_dir>/<identity>/metadata-raw.yaml
        <output_dir>/<identity>.<ext>
    """

    def __init__(
        self,
        workspaces_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """
        Initialize Workspace.

        Args:
            workspaces_dir: Root of per-document directories (defaults to settings.workspaces_dir)
            output_dir: Shared e-book directory (defaults to settings.output_dir)
        """
        self.workspaces_dir = Path(workspaces_dir or settings.workspaces_dir)
        self.output_dir = Path(output_dir or settings.output_dir)

    def ensure(self, identity: str) -> DocumentWorkspace:
        """
        Create the workspace for *identity* and the output directory if absent.

        Args:
            identity: Document identity

        Returns:
            DocumentWorkspace for the identity

        Raises:
            StorageError: If a directory cannot be created
        """
        path = self.workspaces_dir / identity
        for directory in (self.output_dir, path):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory {directory}: {e}") from e

        return DocumentWorkspace(identity=identity, path=path)

    def output_path(self, identity: str, extension: str) -> Path:
        """Location of the generated e-book for *identity*."""
        return self.output_dir / f"{identity}.{extension}"
