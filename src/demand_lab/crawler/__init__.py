"""Crawler module for fetching demand-relevant pages."""

from .crawler import KEY_PATHS, SiteCrawler
from .links import (
    classify_page_type,
    extract_internal_links,
    extract_title,
    normalize_path,
    page_has_cta,
    page_has_form,
)

__all__ = [
    "KEY_PATHS",
    "SiteCrawler",
    "classify_page_type",
    "extract_internal_links",
    "extract_title",
    "normalize_path",
    "page_has_cta",
    "page_has_form",
]
