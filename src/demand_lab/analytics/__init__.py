"""Analytics module for GA4 traffic and conversion snapshots."""

from .client import GA4Client
from .snapshot import AnalyticsSnapshotAdapter, build_snapshot, normalize_snapshot

__all__ = ["AnalyticsSnapshotAdapter", "GA4Client", "build_snapshot", "normalize_snapshot"]
