"""E-book generation from staged artifacts using pandoc."""

import subprocess
from dataclasses import dataclass
from pathlib import Path

import structlog

from readpub.config import OUTPUT_FORMATS, settings
from readpub.core.ingestion.workspace import Artifact, DocumentWorkspace, Workspace
from readpub.utils.exceptions import ConversionError

logger = structlog.get_logger(__name__)


@dataclass
class Completion:
    """Result of a successful conversion."""

    identity: str
    output_path: Path
    returncode: int
    stdout: str = ""
    stderr: str = ""


class EbookGenerator:
    """
    Convert a document workspace into an e-book with pandoc.

    This class handles:
    - pandoc invocation via subprocess
    - output path derivation from the shared output directory
    - capture of converter stdout/stderr for diagnostics
    """

    def __init__(
        self,
        workspace: Workspace,
        pandoc_cmd: str | None = None,
        output_format: str | None = None,
        stylesheet: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize EbookGenerator.

        Args:
            workspace: Workspace owning the output directory
            pandoc_cmd: Path to pandoc binary (defaults to settings.pandoc_cmd)
            output_format: pandoc output format (defaults to settings.output_format)
            stylesheet: CSS file applied to the e-book (defaults to settings.stylesheet)
            timeout: Conversion timeout in seconds (defaults to settings.conversion_timeout)
        """
        self.workspace = workspace
        self.pandoc_cmd = pandoc_cmd or settings.pandoc_cmd
        self.output_format = (output_format or settings.output_format).lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {self.output_format}. "
                f"Allowed values: {', '.join(OUTPUT_FORMATS)}"
            )
        self.stylesheet = stylesheet or settings.stylesheet
        self.timeout = timeout if timeout is not None else settings.conversion_timeout

    @property
    def extension(self) -> str:
        return OUTPUT_FORMATS[self.output_format]

    def check_installed(self) -> str:
        """
        Verify pandoc is installed and accessible.

        Returns:
            First line of ``pandoc --version``

        Raises:
            ConversionError: If pandoc binary not found or not working
        """
        try:
            result = subprocess.run(
                [self.pandoc_cmd, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except FileNotFoundError as e:
            raise ConversionError(
                f"pandoc not found ({self.pandoc_cmd}). Install from https://pandoc.org/installing.html"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError("pandoc version check timed out. Check installation.") from e

        if result.returncode != 0:
            raise ConversionError(f"pandoc not working properly: {result.stderr.strip()}")

        version = result.stdout.split("\n")[0]
        logger.info("pandoc_verified", version=version)
        return version

    def build_command(self, document: DocumentWorkspace, output_path: Path) -> list[str]:
        return [
            self.pandoc_cmd,
            "-f",
            "html",
            "-t",
            self.output_format,
            str(document.path_for(Artifact.EXTRACTED)),
            "--metadata-file",
            str(document.path_for(Artifact.METADATA)),
            "--epub-title-page=false",
            f"--css={self.stylesheet}",
            "-o",
            str(output_path),
        ]

    def generate(self, document: DocumentWorkspace) -> Completion:
        """
        Convert the staged artifacts of *document* into an e-book.

        Args:
            document: Workspace holding extracted.html and metadata.yaml

        Returns:
            Completion with the output path and captured converter output

        Raises:
            ConversionError: If pandoc is missing, times out or exits non-zero
        """
        output_path = self.workspace.output_path(document.identity, self.extension)
        command = self.build_command(document, output_path)

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ConversionError(f"pandoc not found ({self.pandoc_cmd})") from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError(
                f"pandoc timed out after {self.timeout}s converting {document.identity}"
            ) from e

        if result.stdout.strip():
            logger.info("pandoc_stdout", identity=document.identity, output=result.stdout.strip())
        if result.stderr.strip():
            logger.warning("pandoc_stderr", identity=document.identity, output=result.stderr.strip())

        if result.returncode != 0:
            raise ConversionError(
                f"pandoc exited with code {result.returncode} for {document.identity}: "
                f"{result.stderr.strip()}"
            )

        logger.info(
            "ebook_generated",
            identity=document.identity,
            output_path=str(output_path),
            format=self.output_format,
        )
        return Completion(
            identity=document.identity,
            output_path=output_path,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
