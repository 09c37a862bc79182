"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from readpub.config import Settings
from readpub.core.ingestion.fetcher import FetchStrategy
from readpub.core.ingestion.workspace import Workspace
from readpub.utils.exceptions import FetchError

ARTICLE_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Foo Bar</title>
  <meta property="og:title" content="Foo Bar">
  <meta name="author" content="Jane Doe">
  <meta name="description" content="Why &quot;foo&quot; and bar belong together.">
  <meta property="article:published_time" content="2024-03-01T10:00:00+00:00">
  <meta property="og:site_name" content="Example Times">
</head>
<body>
  <nav><a href="/">Home</a> | <a href="/about">About</a></nav>
  <article>
    <h1>Foo Bar</h1>
    <p>Foo and bar have been paired in examples for decades, and the habit says a lot
    about how programmers teach each other. Placeholder names carry no meaning, which
    lets the reader focus entirely on the structure of the code being shown.</p>
    <p>The earliest printed uses appear in technical manuals from the nineteen sixties,
    where engineers needed names that would never be confused with real variables.
    From there the pair spread through universities and into countless tutorials.</p>
    <p>Critics argue that meaningful names would make examples easier to follow. Yet
    the tradition persists, partly out of habit and partly because every reader
    already knows that foo and bar stand for nothing in particular at all.</p>
    <p>Read the <a href="/articles/history">full history</a> for more background on
    the names and the many variations that followed them over the years.</p>
  </article>
  <footer>Copyright Example Times</footer>
</body>
</html>
"""

EMPTY_HTML = "<html><head><title>Nothing</title></head><body><p>Hi.</p></body></html>"


class RecordingStrategy(FetchStrategy):
    """Fetch strategy serving canned pages and recording every call."""

    name = "recording"

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        default: str = ARTICLE_HTML,
        failing: set[str] | None = None,
    ) -> None:
        self.pages = pages or {}
        self.default = default
        self.failing = failing or set()
        self.calls: list[str] = []
        self.close_count = 0

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url in self.failing:
            raise FetchError(f"GET {url} returned HTTP 503")
        return self.pages.get(url, self.default).encode("utf-8")

    async def aclose(self) -> None:
        self.close_count += 1


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """
    Provide test configuration with overrides.

    Yields:
        Settings instance for testing
    """
    # Save original environment
    original_env = os.environ.copy()

    os.environ["OUTPUT_DIR"] = "test_epubs"
    os.environ["WORKSPACES_DIR"] = "test_workspaces"
    os.environ["OUTPUT_FORMAT"] = "epub3"
    os.environ["LOG_LEVEL"] = "debug"

    settings = Settings(_env_file=None)

    yield settings

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    """Workspace rooted in a temporary directory."""
    return Workspace(
        workspaces_dir=tmp_path / "workspaces",
        output_dir=tmp_path / "epubs",
    )


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def empty_html() -> str:
    return EMPTY_HTML


@pytest.fixture
def make_strategy() -> Callable[..., RecordingStrategy]:
    """Factory for recording fetch strategies."""
    return RecordingStrategy
