from __future__ import annotations

"""backend/app/config/settings.py

Application configuration using environment-driven settings.

This module centralizes:
- CORS configuration
- Celery / Redis configuration for background error reports
- Statsig credentials used for admin error notifications
- Display limits applied to user-facing error messages
"""
from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  app_name: str = "genai-error-handler"
  environment: str = "development"

  # CORS
  allowed_origins: List[AnyHttpUrl] = [
      "http://localhost:3000",
      "http://127.0.0.1:3000",
      "http://localhost:5173",
      "http://127.0.0.1:5173",
  ]

  # Celery / Redis
  celery_broker_url: str = "redis://redis:6379/1"
  celery_result_backend: str = "redis://redis:6379/2"

  # Admin notifications
  statsig_server_secret: str | None = None
  error_notifications_via_celery: bool = False
  error_report_detail_max_chars: int = 2000

  # First lines longer than this are replaced by a generic message
  max_display_line_length: int = 150

  model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Return a cached Settings instance."""
  return Settings()
