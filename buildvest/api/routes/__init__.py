"""API route modules."""

from . import auth, health, resources

__all__ = ["auth", "health", "resources"]
