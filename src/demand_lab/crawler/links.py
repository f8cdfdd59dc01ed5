"""HTML helpers used while crawling: links, titles and page classification."""

import re
from urllib.parse import urljoin, urlparse

from ..models import InternalLink, PageType

_LINK_RE = re.compile(r"""<a[^>]+href=["']([^"']+)["'][^>]*>([^<]*)<""", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)

_SKIPPED_SCHEMES = ("#", "mailto:", "tel:", "javascript:")

_FORM_INPUT_MARKERS = (
    'type="email"',
    "type='email'",
    'type="text"',
    'name="email"',
    'type="submit"',
)

PAGE_CTA_PHRASES = (
    "get started",
    "try free",
    "start free",
    "request demo",
    "book demo",
    "schedule demo",
    "contact us",
    "get quote",
    "sign up",
    "buy now",
    "learn more",
)


def normalize_path(path: str) -> str:
    """
    Normalize a URL path for deduplication.

    Collapses ``./`` and ``../`` segments and repeated slashes, and drops
    the trailing slash everywhere except the root.
    """
    segments: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)
    return "/" + "/".join(segments)


def extract_title(html: str) -> str | None:
    match = _TITLE_RE.search(html)
    return match.group(1).strip() if match else None


def extract_internal_links(html: str, base_url: str) -> list[InternalLink]:
    """
    Extract same-origin navigable links from HTML.

    Args:
        html: Raw page HTML.
        base_url: Site root the links are resolved against.

    Returns:
        Links in document order, deduplicated by normalized path.
    """
    base_url = base_url.rstrip("/")
    base_domain = urlparse(base_url).netloc

    links: list[InternalLink] = []
    seen_paths: set[str] = set()

    for match in _LINK_RE.finditer(html):
        href = match.group(1).strip()
        text = match.group(2).strip()

        if href.lower().startswith(_SKIPPED_SCHEMES):
            continue

        parsed = urlparse(urljoin(base_url + "/", href))
        if parsed.scheme not in ("http", "https") or parsed.netloc != base_domain:
            continue

        path = normalize_path(parsed.path)
        if path in seen_paths:
            continue
        seen_paths.add(path)

        links.append(InternalLink(url=f"{base_url}{path}", path=path, text=text))

    return links


def classify_page_type(path: str) -> PageType:
    """Classify a page from its path."""
    lower_path = path.lower()
    if lower_path in ("/", ""):
        return PageType.HOMEPAGE
    if "pricing" in lower_path or "plans" in lower_path:
        return PageType.PRICING
    if "contact" in lower_path or "get-in-touch" in lower_path:
        return PageType.CONTACT
    landing_markers = ("demo", "trial", "get-started", "signup", "landing", "lp/")
    if any(marker in lower_path for marker in landing_markers):
        return PageType.LANDING
    return PageType.OTHER


def page_has_form(html: str) -> bool:
    lower = html.lower()
    return "<form" in lower and any(marker in lower for marker in _FORM_INPUT_MARKERS)


def page_has_cta(html: str) -> bool:
    lower = html.lower()
    return any(phrase in lower for phrase in PAGE_CTA_PHRASES)
