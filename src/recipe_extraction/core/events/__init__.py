"""Application lifecycle events."""

from recipe_extraction.core.events.lifespan import lifespan


__all__ = ["lifespan"]
