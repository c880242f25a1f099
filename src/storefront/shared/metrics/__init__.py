# 📊 storefront/shared/metrics/__init__.py
"""📊 Bootstrap експортера Prometheus `/metrics`."""

from __future__ import annotations

from .exporters import maybe_start_prometheus

__all__ = ["maybe_start_prometheus"]
