# backend/app/config/__init__.py
from __future__ import annotations

"""
Shortcut imports for configuration.

Settings are cached; call ``get_settings.cache_clear()`` after changing
environment variables (tests do this).
"""

from .settings import Settings, get_settings  # noqa: F401
