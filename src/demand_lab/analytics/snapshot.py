"""Analytics snapshot adapter and normalization."""

import asyncio
import math
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from ..config import settings
from ..models import AnalyticsSnapshot
from .client import GA4Client

logger = structlog.get_logger()

PAID_CHANNEL_MARKERS = ("paid", "cpc", "display", "shopping")
CHANNEL_REPORT_LIMIT = 10


def _to_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> int | None:
    number = _to_float(value)
    return int(number) if number is not None else None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _metric_value(row: Mapping[str, Any], index: int) -> int | None:
    metrics = _as_list(row.get("metricValues"))
    if index >= len(metrics) or not isinstance(metrics[index], Mapping):
        return None
    return _to_int(metrics[index].get("value"))


def _dimension_value(row: Mapping[str, Any], index: int) -> str | None:
    dimensions = _as_list(row.get("dimensionValues"))
    if index >= len(dimensions) or not isinstance(dimensions[index], Mapping):
        return None
    value = dimensions[index].get("value")
    return str(value) if value is not None else None


def is_paid_channel(channel: str) -> bool:
    lower = channel.lower()
    return any(marker in lower for marker in PAID_CHANNEL_MARKERS)


def normalize_snapshot(raw: Mapping[str, Any]) -> AnalyticsSnapshot:
    """
    Build an AnalyticsSnapshot from a loosely-shaped mapping.

    Accepts snake_case or camelCase keys and the legacy ``paidTrafficShare``
    and ``totalSessions`` aliases. Missing or malformed values become None.

    Raises:
        ValueError: If ``raw`` is not a mapping.
    """
    if not isinstance(raw, Mapping):
        raise ValueError("Analytics snapshot must be a JSON object")

    traffic_mix_raw = _first_present(raw, "traffic_mix", "trafficMix") or {}
    traffic_mix = {}
    if isinstance(traffic_mix_raw, Mapping):
        for channel, share in traffic_mix_raw.items():
            value = _to_float(share)
            if value is not None:
                traffic_mix[str(channel)] = value

    top_channels_raw = _first_present(raw, "top_channels", "topChannels") or []
    top_channels = [str(c) for c in top_channels_raw] if isinstance(top_channels_raw, list) else []

    return AnalyticsSnapshot(
        traffic_mix=traffic_mix,
        top_channels=top_channels,
        conversion_rate=_to_float(_first_present(raw, "conversion_rate", "conversionRate")),
        paid_share=_to_float(
            _first_present(raw, "paid_share", "paidShare", "paid_traffic_share", "paidTrafficShare")
        ),
        session_volume=_to_int(
            _first_present(raw, "session_volume", "sessionVolume", "total_sessions", "totalSessions")
        ),
        total_conversions=_to_int(_first_present(raw, "total_conversions", "totalConversions")) or 0,
    )


def build_snapshot(
    traffic_report: Mapping[str, Any],
    channels_report: Mapping[str, Any],
) -> AnalyticsSnapshot:
    """
    Combine a GA4 traffic summary and channel breakdown into a snapshot.

    The traffic report carries sessions, totalUsers and conversions in one
    row; the channel report has one row per default channel group.
    """
    if not isinstance(traffic_report, Mapping):
        traffic_report = {}
    if not isinstance(channels_report, Mapping):
        channels_report = {}

    traffic_rows = _as_list(traffic_report.get("rows"))
    traffic_row = traffic_rows[0] if traffic_rows and isinstance(traffic_rows[0], Mapping) else {}

    sessions = _metric_value(traffic_row, 0)
    total_users = _metric_value(traffic_row, 1)
    conversions = _metric_value(traffic_row, 2) or 0

    conversion_rate = None
    if sessions and sessions > 0:
        # Duplicate conversion events can push conversions past sessions
        denominator = total_users if conversions > sessions and total_users else sessions
        conversion_rate = min(conversions / denominator, 1.0)

    total_sessions = max(sessions or 0, 0)
    traffic_mix: dict[str, float] = {}
    top_channels: list[str] = []
    paid_sessions = 0

    for row in _as_list(channels_report.get("rows")):
        if not isinstance(row, Mapping):
            continue
        channel = _dimension_value(row, 0) or "Unknown"
        channel_sessions = _metric_value(row, 0) or 0

        top_channels.append(channel)
        if total_sessions > 0:
            traffic_mix[channel] = channel_sessions / total_sessions
        if is_paid_channel(channel):
            paid_sessions += channel_sessions

    return AnalyticsSnapshot(
        traffic_mix=traffic_mix,
        top_channels=top_channels,
        conversion_rate=conversion_rate,
        paid_share=paid_sessions / total_sessions if total_sessions > 0 else None,
        session_volume=sessions,
        total_conversions=conversions,
    )


class AnalyticsSnapshotAdapter:
    """
    Produces an AnalyticsSnapshot from GA4, or None when unavailable.

    Missing configuration, HTTP failures and malformed responses all
    resolve to None, which downstream scoring treats as zero analytics
    confidence.
    """

    def __init__(self, client: GA4Client | None = None):
        self._client = client

    def _resolve_client(self, workspace_id: str | None) -> GA4Client | None:
        if self._client is not None:
            return self._client

        property_id = settings.ga4_property_id
        if workspace_id and workspace_id in settings.ga4_workspace_properties:
            property_id = settings.ga4_workspace_properties[workspace_id]

        if not property_id or not settings.ga4_access_token:
            return None
        return GA4Client(property_id=property_id, access_token=settings.ga4_access_token)

    def _report_bodies(self) -> tuple[dict[str, Any], dict[str, Any]]:
        date_ranges = [{"startDate": f"{settings.ga4_lookback_days}daysAgo", "endDate": "today"}]
        conversion_metric = settings.ga4_conversion_metric

        traffic_body = {
            "dateRanges": date_ranges,
            "metrics": [
                {"name": "sessions"},
                {"name": "totalUsers"},
                {"name": conversion_metric},
            ],
        }
        channels_body = {
            "dateRanges": date_ranges,
            "dimensions": [{"name": "sessionDefaultChannelGroup"}],
            "metrics": [{"name": "sessions"}, {"name": conversion_metric}],
            "orderBys": [{"metric": {"metricName": "sessions"}, "desc": True}],
            "limit": CHANNEL_REPORT_LIMIT,
        }
        return traffic_body, channels_body

    async def get_snapshot(self, workspace_id: str | None = None) -> AnalyticsSnapshot | None:
        """Fetch the analytics snapshot for a workspace."""
        client = self._resolve_client(workspace_id)
        if client is None:
            logger.info("No GA4 configuration available", workspace_id=workspace_id)
            return None

        traffic_body, channels_body = self._report_bodies()
        try:
            traffic_report, channels_report = await asyncio.gather(
                client.run_report(traffic_body),
                client.run_report(channels_body),
            )
            snapshot = build_snapshot(traffic_report, channels_report)
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error("GA4 fetch failed", property_id=client.property_id, error=str(e))
            return None
        finally:
            if client is not self._client:
                await client.stop()

        logger.info(
            "GA4 snapshot retrieved",
            sessions=snapshot.session_volume,
            channels=len(snapshot.top_channels),
            conversion_rate=snapshot.conversion_rate,
        )
        return snapshot
