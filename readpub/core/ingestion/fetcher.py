"""Raw page retrieval with cache-aware, pluggable fetch strategies."""

import contextlib
from abc import ABC, abstractmethod

import httpx
import structlog

from readpub.config import settings
from readpub.core.ingestion.browser_automation import BrowserSession
from readpub.core.ingestion.workspace import Artifact, DocumentWorkspace
from readpub.utils.exceptions import FetchError

logger = structlog.get_logger(__name__)


class FetchStrategy(ABC):
    """A way of turning a URL into raw page bytes."""

    name: str

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """
        Retrieve the raw content of *url*.

        Raises:
            FetchError: If the content cannot be retrieved
        """

    async def aclose(self) -> None:
        """Release any resources held across fetches."""


class DirectFetchStrategy(FetchStrategy):
    """Plain HTTP GET, one request per call."""

    name = "direct"

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout or settings.request_timeout
        self.user_agent = user_agent or settings.user_agent
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    body = b"".join([chunk async for chunk in response.aiter_bytes()])
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"GET {url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"GET {url} failed: {type(e).__name__}: {e}") from e

        logger.debug("direct_fetch_complete", url=url, size_bytes=len(body))
        return body


class BrowserProfileStrategy(FetchStrategy):
    """
    Render pages in a browser running on a user profile.

    The browser session is launched on the first fetch and reused for every
    following one until :meth:`aclose`.
    """

    name = "browser-profile"

    def __init__(
        self,
        profile_path: str | None,
        headless: bool | None = None,
        navigation_timeout: float | None = None,
    ) -> None:
        """
        Initialize strategy.

        Args:
            profile_path: Resolved profile directory, or None if resolution failed
            headless: Run browser without a window (defaults to settings)
            navigation_timeout: Navigation timeout in seconds (defaults to settings)
        """
        self.profile_path = profile_path
        self.headless = headless
        self.navigation_timeout = navigation_timeout
        self.session: BrowserSession | None = None

    def _create_session(self, profile_path: str) -> BrowserSession:
        return BrowserSession(
            profile_path,
            headless=self.headless,
            navigation_timeout=self.navigation_timeout,
        )

    async def _ensure_session(self) -> BrowserSession:
        if self.session is not None:
            return self.session

        if not self.profile_path:
            raise FetchError("No browser profile resolved; cannot fetch with the browser")

        session = self._create_session(self.profile_path)
        try:
            await session.launch()
        except Exception as e:
            with contextlib.suppress(Exception):
                await session.close()
            raise FetchError(f"Failed to start browser session: {type(e).__name__}: {e}") from e

        self.session = session
        return session

    async def fetch(self, url: str) -> bytes:
        session = await self._ensure_session()
        try:
            source = await session.page_source(url)
        except Exception as e:
            raise FetchError(f"Browser failed to load {url}: {type(e).__name__}: {e}") from e

        return source.encode("utf-8")

    async def aclose(self) -> None:
        if self.session is not None:
            session, self.session = self.session, None
            await session.close()


class FetchSession:
    """
    Scoped owner of a fetch strategy for the length of a run.

    Usage:
        async with FetchSession(strategy) as session:
            await fetcher.fetch(url, document, session)

    Leaving the block releases the strategy exactly once, whatever happened
    inside it.
    """

    def __init__(self, strategy: FetchStrategy) -> None:
        self.strategy = strategy
        self.closed = False

    async def aclose(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self.strategy.aclose()
        logger.info("fetch_session_closed", strategy=self.strategy.name)

    async def __aenter__(self) -> "FetchSession":
        return self

    async def __aexit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> None:
        await self.aclose()


class ContentFetcher:
    """Fetch raw content into a document workspace, at most once per document."""

    async def fetch(
        self, url: str, document: DocumentWorkspace, session: FetchSession
    ) -> bytes:
        """
        Make sure the raw content of *url* is staged in *document*.

        Args:
            url: Article URL
            document: Workspace of the document
            session: Open fetch session providing the strategy

        Returns:
            Raw content bytes

        Raises:
            FetchError: If the content is not cached and cannot be retrieved
            StorageError: If the content cannot be persisted
        """
        if document.exists(Artifact.RAW_CONTENT):
            logger.info(
                "raw_content_cached",
                identity=document.identity,
                path=str(document.path_for(Artifact.RAW_CONTENT)),
            )
            return document.read(Artifact.RAW_CONTENT)

        if session.closed:
            raise FetchError("Fetch session already closed")

        strategy = session.strategy
        logger.info("raw_content_fetching", url=url, strategy=strategy.name)
        body = await strategy.fetch(url)
        document.write(Artifact.RAW_CONTENT, body)
        logger.info(
            "raw_content_fetched",
            identity=document.identity,
            strategy=strategy.name,
            size_bytes=len(body),
        )
        return body
