"""
Browser Automation Module
Playwright wrapper for launching the browser, logging in to Canvas and
exposing live quiz pages through the page capability interface.
"""

import asyncio
import logging
from typing import List, Optional

from playwright.async_api import (
    async_playwright, Browser, ElementHandle, Error as PlaywrightError, Page,
    TimeoutError as PlaywrightTimeout,
)

from .classifier import CANVAS_PROFILE, MarkupProfile
from .config import CanvasConfig
from .errors import ElementNotFound, LoginError, SessionError
from .page import Box, PageElement, PageHandle, Point

logger = logging.getLogger(__name__)

LOGIN_USERNAME_SELECTOR = 'input[name="pseudonym_session[unique_id]"]'
LOGIN_PASSWORD_SELECTOR = 'input[name="pseudonym_session[password]"]'
LOGIN_SUBMIT_SELECTOR = 'button[type="submit"]'


class PlaywrightElement(PageElement):
    """PageElement over a Playwright element handle."""

    def __init__(self, handle: ElementHandle):
        self.handle = handle

    async def query(self, selector: str) -> Optional['PlaywrightElement']:
        handle = await self.handle.query_selector(selector)
        return PlaywrightElement(handle) if handle else None

    async def query_all(self, selector: str) -> List['PlaywrightElement']:
        return [PlaywrightElement(h) for h in await self.handle.query_selector_all(selector)]

    async def text(self) -> str:
        return ((await self.handle.text_content()) or '').strip()

    async def classes(self) -> List[str]:
        return await self.handle.evaluate('(el) => Array.from(el.classList)')

    async def attribute(self, name: str) -> Optional[str]:
        return await self.handle.get_attribute(name)

    async def closest(self, selector: str) -> Optional['PlaywrightElement']:
        result = await self.handle.evaluate_handle('(el, sel) => el.closest(sel)', selector)
        element = result.as_element()
        return PlaywrightElement(element) if element else None

    async def click(self) -> None:
        await self.handle.click()

    async def bounding_box(self) -> Optional[Box]:
        return await self.handle.bounding_box()

    async def select_option(self, label: str) -> None:
        try:
            await self.handle.select_option(label=label)
        except PlaywrightError as e:
            raise ElementNotFound(f"option:{label}", f"Could not select option '{label}': {e}") from e


class PlaywrightPage(PageHandle):
    """PageHandle over a live Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    async def query(self, selector: str) -> Optional[PlaywrightElement]:
        handle = await self.page.query_selector(selector)
        return PlaywrightElement(handle) if handle else None

    async def query_all(self, selector: str) -> List[PlaywrightElement]:
        return [PlaywrightElement(h) for h in await self.page.query_selector_all(selector)]

    async def wait_for(self, selector: str, timeout: Optional[int] = None) -> PlaywrightElement:
        try:
            handle = await self.page.wait_for_selector(selector, timeout=timeout)
        except PlaywrightTimeout:
            raise ElementNotFound(selector, f"Timed out waiting for {selector}")
        if handle is None:
            raise ElementNotFound(selector)
        return PlaywrightElement(handle)

    async def drag(self, start: Point, end: Point) -> None:
        mouse = self.page.mouse
        await mouse.move(*start)
        await mouse.down()
        await mouse.move(*end)
        await mouse.up()


class BrowserManager:
    """
    Manages the headless browser using Playwright.
    Provides a single page on which the whole quiz run happens.
    """

    def __init__(self, headless: bool = True, timeout: int = 30000):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode
            timeout: Default timeout in milliseconds
        """
        self.headless = headless
        self.timeout = timeout
        self.browser: Optional[Browser] = None
        self.playwright = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Start the browser instance."""
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                args=['--no-sandbox', '--disable-setuid-sandbox']
            )
            logger.info("Browser started successfully")
        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            await self.close()
            raise SessionError(f"Failed to start browser: {e}") from e

    async def close(self):
        """Close the browser instance."""
        if self.browser:
            await self.browser.close()
            self.browser = None
        if self.playwright:
            await self.playwright.stop()
            self.playwright = None
        logger.info("Browser closed")

    async def create_page(self) -> Page:
        """Create a new browser page."""
        if not self.browser:
            raise SessionError('Browser not initialized. Call initialize() first.')
        context = await self.browser.new_context(viewport={'width': 1920, 'height': 1080})
        page = await context.new_page()
        page.set_default_timeout(self.timeout)
        return page

    async def goto(self, page: Page, url: str, max_retries: int = 3):
        """Navigate with a few attempts on timeouts."""
        for attempt in range(max_retries):
            try:
                logger.info(f"Loading page: {url} (attempt {attempt + 1})")
                await page.goto(url, timeout=self.timeout)
                return
            except PlaywrightTimeout:
                logger.warning(f"Timeout loading page (attempt {attempt + 1})")
                if attempt == max_retries - 1:
                    raise
                await asyncio.sleep(2)


class CanvasSession:
    """Logged-in Canvas browser session."""

    def __init__(self, config: CanvasConfig, browser: Optional[BrowserManager] = None,
                 profile: MarkupProfile = CANVAS_PROFILE):
        self.config = config
        self.browser = browser or BrowserManager()
        self.profile = profile
        self.page: Optional[Page] = None

    async def initialize(self):
        await self.browser.start()
        self.page = await self.browser.create_page()

    async def close(self):
        await self.browser.close()
        self.page = None

    def get_page(self) -> Page:
        if self.page is None:
            raise SessionError('Browser not initialized. Call initialize() first.')
        return self.page

    async def login(self):
        """Log in through the Canvas login form."""
        page = self.get_page()

        try:
            await self.browser.goto(page, f"{self.config.canvas_url}/login")
            await page.wait_for_selector(LOGIN_USERNAME_SELECTOR)
            await page.fill(LOGIN_USERNAME_SELECTOR, self.config.username)
            await page.fill(LOGIN_PASSWORD_SELECTOR, self.config.password)

            async with page.expect_navigation():
                await page.click(LOGIN_SUBMIT_SELECTOR)
        except PlaywrightError as e:
            raise LoginError(f"Login failed: {e}") from e

        if '/login' in page.url:
            raise LoginError('Login failed: Login failed. Please check your credentials.')
        logger.info(f"Logged in to {self.config.canvas_url}")

    async def navigate_to_quiz(self, course_id: str, quiz_id: str) -> PlaywrightPage:
        """Open the quiz taking page and wait for its questions to render."""
        page = self.get_page()
        url = f"{self.config.canvas_url}/courses/{course_id}/quizzes/{quiz_id}/take"
        await self.browser.goto(page, url)
        try:
            await page.wait_for_selector(self.profile.container)
        except PlaywrightTimeout:
            raise ElementNotFound(self.profile.container, f"No questions rendered on {url}")
        return PlaywrightPage(page)
