"""Rendered page retrieval with a Playwright browser bound to a user profile."""

from pathlib import Path

import structlog
from playwright.async_api import (
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from readpub.config import settings

logger = structlog.get_logger(__name__)


class BrowserSession:
    """
    Playwright Firefox session running on an existing profile directory.

    The profile carries cookies and logins, so pages behind a session render
    the way they do in the user's own browser. Launching is expensive; one
    session is meant to serve every URL of a batch.
    """

    def __init__(
        self,
        profile_path: str | Path,
        headless: bool | None = None,
        navigation_timeout: float | None = None,
    ) -> None:
        """
        Initialize browser session.

        Args:
            profile_path: Firefox profile directory
            headless: Run browser without a window (defaults to settings.browser_headless)
            navigation_timeout: Navigation timeout in seconds (defaults to settings.navigation_timeout)
        """
        self.profile_path = str(profile_path)
        self.headless = settings.browser_headless if headless is None else headless
        self.navigation_timeout = navigation_timeout or settings.navigation_timeout
        self.context: BrowserContext | None = None
        self.page: Page | None = None
        self._playwright: Playwright | None = None

    @property
    def is_running(self) -> bool:
        return self.page is not None

    async def launch(self) -> None:
        """Start Playwright and open a persistent context on the profile."""
        logger.info("browser_launching", profile=self.profile_path, headless=self.headless)

        self._playwright = await async_playwright().start()
        self.context = await self._playwright.firefox.launch_persistent_context(
            self.profile_path,
            headless=self.headless,
        )
        self.context.set_default_navigation_timeout(self.navigation_timeout * 1000)
        self.page = self.context.pages[0] if self.context.pages else await self.context.new_page()

        logger.info("browser_launched", profile=self.profile_path)

    async def page_source(self, url: str) -> str:
        """
        Navigate to *url* and return the rendered page source.

        Raises:
            RuntimeError: If the session has not been launched
        """
        if not self.page:
            raise RuntimeError("Browser not launched. Call launch() first.")

        await self.page.goto(url, wait_until="load")
        return await self.page.content()

    async def close(self) -> None:
        """Close browser and cleanup resources."""
        if self.context:
            await self.context.close()
        if self._playwright:
            await self._playwright.stop()

        self.context = None
        self.page = None
        self._playwright = None
        logger.info("browser_closed", profile=self.profile_path)

    async def __aenter__(self) -> "BrowserSession":
        """Async context manager entry."""
        await self.launch()
        return self

    async def __aexit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> None:
        """Async context manager exit."""
        await self.close()
