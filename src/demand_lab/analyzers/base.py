"""Base analyzer interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..models import CrawledPage

SignalsT = TypeVar("SignalsT")


class BaseAnalyzer(ABC, Generic[SignalsT]):
    """Abstract base class for all signal analyzers.

    Analyzers are pure: they read the crawled pages and return a signal
    bundle without mutating the pages or keeping state between calls.
    """

    @abstractmethod
    def analyze(self, pages: list[CrawledPage]) -> SignalsT:
        """
        Analyze the crawled pages and return a signal bundle.

        Args:
            pages: All pages fetched in this run, possibly empty.

        Returns:
            The analyzer's signal bundle.
        """
        pass
