"""Analyzers module for extracting demand signals from crawled pages."""

from .ad_scent_analyzer import AdScentAnalyzer
from .base import BaseAnalyzer
from .cta_analyzer import CtaAnalyzer, classify_cta_type
from .landing_page_analyzer import LandingPageAnalyzer
from .tracking_analyzer import TrackingAnalyzer

__all__ = [
    "AdScentAnalyzer",
    "BaseAnalyzer",
    "CtaAnalyzer",
    "LandingPageAnalyzer",
    "TrackingAnalyzer",
    "classify_cta_type",
]
