"""Storage module for persisting reports."""

from .manager import StorageManager, report_to_dict

__all__ = ["StorageManager", "report_to_dict"]
