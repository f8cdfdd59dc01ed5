"""Storage manager for Demand Lab reports."""

import json
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import aiofiles
import structlog

from ..config import settings
from ..models import DemandLabReport

logger = structlog.get_logger()


def _to_primitive(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(_to_primitive(k)): _to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_primitive(v) for v in value]
    return value


def report_to_dict(report: DemandLabReport) -> dict[str, Any]:
    """Convert a report to JSON-serializable primitives."""
    return _to_primitive(asdict(report))


class StorageManager:
    """Manages storage of Demand Lab reports."""

    def __init__(self, base_url: str, output_dir: Path | None = None):
        self.base_url = base_url
        self.domain = urlparse(base_url).netloc or "unknown"

        # Unique folder per run
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        folder_name = f"{self._sanitize_domain(self.domain)}_{timestamp}"
        self.output_dir = (output_dir or settings.output_dir) / folder_name

    def _sanitize_domain(self, domain: str) -> str:
        """Convert domain to safe folder name."""
        return domain.replace(":", "_").replace("/", "_").replace(".", "_")

    def get_output_dir(self) -> Path:
        """Get the output directory path."""
        return self.output_dir

    async def save_report(self, report: DemandLabReport) -> Path:
        """Save the complete report as JSON."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / "report.json"

        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(json.dumps(report_to_dict(report), indent=2))

        logger.info("Saved report", path=str(filepath))
        return filepath
