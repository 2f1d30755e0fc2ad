"""
Curing orchestrator.

Loads a page, inlines its stylesheets, scripts and images concurrently, and
serializes the result into a self-contained document.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional, Union
from urllib.parse import ParseResult

from bs4 import BeautifulSoup, FeatureNotFound, Tag

from .fetcher import AssetFetcher
from .reporter import CureReporter, LoggingReporter
from .transformers import inline_image, inline_script, inline_style
from ..utils.constants import (
    DEFAULT_USER_AGENT,
    IMAGE_EXTENSIONS,
    SCRIPT_EXTENSIONS,
    STYLE_EXTENSIONS,
)
from ..utils.errors import (
    AssetError,
    ConfigurationError,
    FetchError,
    InvalidURL,
    LoadError,
    SerializationError,
)
from ..utils.extensions import ExtensionMatcher
from ..utils.log import get_logger
from ..utils.paths import normalize_source_url, parse_origin


class CureState(Enum):
    """Lifecycle of an Antidote instance."""

    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    LOADING = "loading"
    CURING = "curing"
    CURED = "cured"
    FAILED = "failed"


@dataclass(frozen=True)
class Ingredients:
    """Options for curing one page."""

    url: str
    # Seconds per request; None keeps the aiohttp default
    timeout: Optional[float] = None
    # Maximum simultaneous asset fetches; None is unbounded
    concurrency: Optional[int] = None
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class CureSummary:
    """Statistics of the last cure."""

    url: str = ""
    styles_inlined: int = 0
    scripts_inlined: int = 0
    images_inlined: int = 0
    errors: List[AssetError] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def assets_inlined(self) -> int:
        return self.styles_inlined + self.scripts_inlined + self.images_inlined


class Antidote:
    """
    Cures a web page of its external asset references.

    Usage:
        antidote = Antidote()
        antidote.configure("https://example.com")
        html = await antidote.cure()

    Each <link>, <script src> and <img src> is handled by its own task.
    An asset that cannot be matched, resolved or fetched is reported and
    left untouched; only loading, parsing and serializing the page are
    fatal. There is no cancellation: without a timeout in the ingredients,
    a hanging fetch holds up the whole cure.
    """

    def __init__(
        self,
        reporter: Optional[CureReporter] = None,
        style_extensions: Iterable[str] = STYLE_EXTENSIONS,
        script_extensions: Iterable[str] = SCRIPT_EXTENSIONS,
        image_extensions: Iterable[str] = IMAGE_EXTENSIONS
    ):
        """
        Initialize the antidote.

        Args:
            reporter: Sink for per-asset errors (logs them by default)
            style_extensions: Patterns identifying stylesheet links
            script_extensions: Patterns identifying external scripts
            image_extensions: Patterns identifying inlinable images
        """
        self.reporter = reporter if reporter is not None else LoggingReporter()
        self.style_matcher = ExtensionMatcher(style_extensions)
        self.script_matcher = ExtensionMatcher(script_extensions)
        self.image_matcher = ExtensionMatcher(image_extensions)
        self.logger = get_logger("antidote")

        self._state = CureState.UNINITIALIZED
        self._ingredients: Optional[Ingredients] = None
        self._origin: Optional[ParseResult] = None
        self._website: Optional[BeautifulSoup] = None
        self._fetcher: Optional[AssetFetcher] = None
        self._tree_lock: Optional[asyncio.Lock] = None
        self._cured_html = ""
        self._summary = CureSummary()

    @property
    def state(self) -> CureState:
        return self._state

    @property
    def ingredients(self) -> Optional[Ingredients]:
        return self._ingredients

    @property
    def cured_html(self) -> str:
        """Last successfully cured document ('' before the first success)."""
        return self._cured_html

    @property
    def summary(self) -> CureSummary:
        return self._summary

    @property
    def errors(self) -> List[AssetError]:
        """Asset errors reported during the last cure."""
        return list(self._summary.errors)

    def last_cured_output(self) -> str:
        return self._cured_html

    def configure(self, target: Union[str, Ingredients]) -> None:
        """
        Set the page to cure.

        Args:
            target: Page URL or full Ingredients
        """
        if isinstance(target, str):
            target = Ingredients(url=target)

        if not isinstance(target, Ingredients) or not target.url:
            raise ConfigurationError("A page URL is required")

        self._ingredients = target
        self._state = CureState.CONFIGURED

    def mix(self, ingredients: Ingredients) -> None:
        """Alias of configure() taking Ingredients."""
        self.configure(ingredients)

    async def cure(self) -> str:
        """
        Run the cure on the configured page.

        Returns:
            The cured HTML document

        Raises:
            ConfigurationError: If configure() was never called
            InvalidURL: If the configured URL cannot be parsed
            LoadError: If the page cannot be fetched or parsed
            SerializationError: If the cured tree cannot be serialized
        """
        if self._ingredients is None:
            raise ConfigurationError("Antidote.configure() must be called before Antidote.cure()")

        ingredients = self._ingredients
        start_time = time.time()
        self._summary = CureSummary(url=ingredients.url)

        try:
            self._origin = parse_origin(ingredients.url)
        except InvalidURL:
            self._state = CureState.FAILED
            raise

        self._state = CureState.LOADING
        self.logger.info(f"Curing {ingredients.url}")

        async with AssetFetcher(
            timeout=ingredients.timeout,
            concurrency=ingredients.concurrency,
            user_agent=ingredients.user_agent
        ) as fetcher:
            self._fetcher = fetcher
            try:
                self._website = await self._load_page(ingredients.url)

                self._state = CureState.CURING
                self._tree_lock = asyncio.Lock()
                await self._cure_assets()
            finally:
                self._fetcher = None

        try:
            cured_html = str(self._website)
        except Exception as e:
            self._state = CureState.FAILED
            raise SerializationError(f"Could not serialize {ingredients.url}: {e}") from e

        self._cured_html = cured_html
        self._state = CureState.CURED
        self._summary.duration_seconds = time.time() - start_time

        self.logger.info(
            f"Cured {ingredients.url}: {self._summary.assets_inlined} assets inlined, "
            f"{len(self._summary.errors)} failed"
        )

        return cured_html

    async def _load_page(self, url: str) -> BeautifulSoup:
        try:
            html = await self._fetcher.fetch_text(url)
        except FetchError as e:
            self._state = CureState.FAILED
            raise LoadError(f"Could not load {url}: {e}") from e

        try:
            try:
                return BeautifulSoup(html, 'lxml')
            except FeatureNotFound:
                return BeautifulSoup(html, 'html.parser')
        except Exception as e:
            self._state = CureState.FAILED
            raise LoadError(f"Could not parse {url}: {e}") from e

    async def _cure_assets(self) -> None:
        """Run all asset routines concurrently and wait for them."""
        await asyncio.gather(
            self._cure_css(),
            self._cure_js(),
            self._cure_images()
        )

    async def _cure_css(self) -> None:
        """Replace every stylesheet <link> with an inline <style>."""
        async def inline(link: Tag, href: str, extension: str, url: str) -> None:
            css = await self._fetcher.fetch_text(url)
            async with self._tree_lock:
                inline_style(self._website, link, css)
            self._summary.styles_inlined += 1

        await self._cure_elements(
            self._website.find_all('link', href=True),
            'href',
            self.style_matcher,
            inline
        )

    async def _cure_js(self) -> None:
        """Replace every external <script> with an inline one."""
        async def inline(script: Tag, src: str, extension: str, url: str) -> None:
            js = await self._fetcher.fetch_text(url)
            async with self._tree_lock:
                inline_script(self._website, script, js)
            self._summary.scripts_inlined += 1

        await self._cure_elements(
            self._website.find_all('script', src=True),
            'src',
            self.script_matcher,
            inline
        )

    async def _cure_images(self) -> None:
        """Point every <img> at a base64 data URL of its image."""
        async def inline(img: Tag, src: str, extension: str, url: str) -> None:
            content = await self._fetcher.fetch_bytes(url)
            async with self._tree_lock:
                inline_image(img, content, extension)
            self._summary.images_inlined += 1

        images = [
            img for img in self._website.find_all('img', src=True)
            if not img['src'].startswith('data:')
        ]

        await self._cure_elements(images, 'src', self.image_matcher, inline)

    async def _cure_elements(
        self,
        elements: List[Tag],
        attribute: str,
        matcher: ExtensionMatcher,
        inline: Callable[[Tag, str, str, str], Awaitable[None]]
    ) -> None:
        """
        Cure each element in its own task and wait for all of them.

        Args:
            elements: Elements of one asset class
            attribute: Attribute holding the asset reference
            matcher: Extension matcher for the asset class
            inline: Coroutine fetching and inlining one asset
        """
        if not elements:
            return

        self.logger.debug(f"Curing {len(elements)} <{elements[0].name}> elements")

        tasks = [
            self._cure_element(element, attribute, matcher, inline)
            for element in elements
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for element, result in zip(elements, results):
            if isinstance(result, Exception):
                self.logger.error(
                    f"Unexpected error curing <{element.name} {attribute}=...>: {result}"
                )

    async def _cure_element(
        self,
        element: Tag,
        attribute: str,
        matcher: ExtensionMatcher,
        inline: Callable[[Tag, str, str, str], Awaitable[None]]
    ) -> None:
        reference = element.get(attribute)
        if not isinstance(reference, str):
            return

        try:
            extension = matcher.match(reference)
            if not extension:
                return

            url = normalize_source_url(reference, self._origin)
            await inline(element, reference, extension, url)

        except AssetError as e:
            self._summary.errors.append(e)
            self.reporter.report(e)
