"""Bounded best-effort crawler for the demand-relevant pages of a site."""

import asyncio

import httpx
import structlog

from ..config import settings
from ..models import CrawledPage
from .links import (
    classify_page_type,
    extract_internal_links,
    extract_title,
    page_has_cta,
    page_has_form,
)

logger = structlog.get_logger()

# Well-known marketing paths probed directly on every site
KEY_PATHS = (
    "/demo",
    "/request-demo",
    "/get-started",
    "/trial",
    "/free-trial",
    "/pricing",
    "/contact",
    "/contact-us",
    "/get-quote",
    "/schedule",
    "/book",
    "/signup",
    "/sign-up",
    "/register",
    "/download",
    "/resources",
    "/landing",
    "/services",
    "/about",
)

NOT_FOUND_MARKER = "page not found"


class SiteCrawler:
    """
    Fetches the homepage and a small set of demand-relevant pages.

    The crawl never raises: unreachable pages are skipped, so a dead site
    yields an empty page list instead of an error.
    """

    def __init__(
        self,
        base_url: str,
        max_pages: int | None = None,
        max_discovered_links: int | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.strip().rstrip("/")
        self.max_pages = max_pages if max_pages is not None else settings.max_pages
        self.max_discovered_links = (
            max_discovered_links if max_discovered_links is not None else settings.max_discovered_links
        )
        self.timeout = timeout if timeout is not None else settings.request_timeout

        self._client = client
        self._owns_client = client is None
        self._semaphore = asyncio.Semaphore(settings.concurrent_requests)

    async def start(self) -> None:
        """Initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": settings.user_agent, "Accept": "text/html"},
            )

    async def stop(self) -> None:
        """Close HTTP client if this crawler created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_page(self, url: str) -> str | None:
        """
        Fetch a single page body.

        Returns:
            The body text, or None on network error, timeout or non-2xx status.
        """
        async with self._semaphore:
            try:
                response = await self._client.get(url, timeout=self.timeout)
            except httpx.TimeoutException:
                logger.debug("Page fetch timed out", url=url)
                return None
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.debug("Page fetch failed", url=url, error=str(e))
                return None

        if not response.is_success:
            logger.debug("Page fetch returned error status", url=url, status_code=response.status_code)
            return None
        return response.text

    def _build_page(self, url: str, path: str, html: str) -> CrawledPage:
        return CrawledPage(
            url=url,
            path=path,
            html=html,
            title=extract_title(html),
            page_type=classify_page_type(path),
            has_form=page_has_form(html),
            has_cta=page_has_cta(html),
        )

    async def crawl(self) -> list[CrawledPage]:
        """Crawl the site and return pages in discovery order."""
        logger.info("Starting crawl", base_url=self.base_url, max_pages=self.max_pages)

        await self.start()
        try:
            pages = await self._crawl()
        finally:
            await self.stop()

        logger.info("Crawl completed", base_url=self.base_url, pages_crawled=len(pages))
        return pages

    async def _crawl(self) -> list[CrawledPage]:
        pages: list[CrawledPage] = []
        fetched_paths: set[str] = set()

        def add(url: str, path: str, html: str) -> None:
            pages.append(self._build_page(url, path, html))
            fetched_paths.add(path)

        if not self.base_url:
            return pages

        homepage_html = await self.fetch_page(self.base_url)
        if homepage_html:
            add(self.base_url, "/", homepage_html)

            keywords = [path.lstrip("/") for path in KEY_PATHS]
            candidates = [
                link
                for link in extract_internal_links(homepage_html, self.base_url)
                if link.path not in fetched_paths and any(k in link.path for k in keywords)
            ][: self.max_discovered_links]

            # gather keeps results in candidate order
            bodies = await asyncio.gather(*(self.fetch_page(link.url) for link in candidates))
            for link, html in zip(candidates, bodies):
                if len(pages) >= self.max_pages:
                    break
                if html and len(html) > settings.min_discovered_page_bytes:
                    add(link.url, link.path, html)
        else:
            logger.warning("Homepage unreachable", url=self.base_url)

        for path in KEY_PATHS:
            if len(pages) >= self.max_pages:
                break
            if path in fetched_paths:
                continue

            url = f"{self.base_url}{path}"
            html = await self.fetch_page(url)
            if (
                html
                and len(html) > settings.min_probed_page_bytes
                and NOT_FOUND_MARKER not in html.lower()
            ):
                add(url, path, html)

        return pages
