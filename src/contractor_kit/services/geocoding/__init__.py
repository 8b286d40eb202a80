"""Geocoding services."""

from .batch import RateLimitedBatchResolver, RequestSpacer
from .client import GeocodeClient

__all__ = ["GeocodeClient", "RateLimitedBatchResolver", "RequestSpacer"]
