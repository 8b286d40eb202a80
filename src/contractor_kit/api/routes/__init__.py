"""Route group exports."""

from . import health, mileage, routes

__all__ = ["routes", "health", "mileage"]
