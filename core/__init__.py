"""
Core package: configuration, error taxonomy, security primitives and middleware.
Kept apart from the API and service layers so each can be tested alone.
"""

from core.config import get_settings

__all__ = ["get_settings"]
