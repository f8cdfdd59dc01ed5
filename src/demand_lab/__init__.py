"""Demand Lab - demand generation diagnostics for marketing websites."""

__version__ = "0.1.0"
