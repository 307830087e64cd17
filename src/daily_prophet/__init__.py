"""Once-a-day generated newspaper served from a date-keyed edition cache."""

__all__ = ["cache", "config", "generator", "models", "sections", "server"]
