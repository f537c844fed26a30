"""Settings Manager - Handles reader preferences and API key configuration."""

import dataclasses
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from lingua_reader.core import AppSettings
from lingua_reader.io import LibraryRepository

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "GEMINI_API_KEY"


class SettingsManager:
    """
    Manages settings persisted in the library storage.

    Settings are loaded once and merged with defaults at that point. The API
    key falls back to GEMINI_API_KEY from the environment or a .env file in
    the project root when none is stored.
    """

    def __init__(self, repository: LibraryRepository, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            repository: Repository holding the persisted settings.
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        self._project_root = Path(project_root)
        load_dotenv(dotenv_path=self._project_root / ".env")

        self._repository = repository
        self._settings = repository.get_settings()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def update(self, **changes) -> AppSettings:
        """Validate and persist changed fields.

        Raises:
            ValueError: If a field is unknown or a value is invalid.
        """
        unknown = set(changes) - {f.name for f in dataclasses.fields(AppSettings)}
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        updated = dataclasses.replace(self._settings, **changes)
        self._repository.save_settings(updated)
        self._settings = updated
        logger.info("Settings updated: %s", ", ".join(sorted(changes)))
        return updated

    def get_api_key(self) -> Optional[str]:
        """Stored API key, else the environment value, else None."""
        stored = self._settings.api_key.strip()
        if stored:
            return stored
        key = os.getenv(API_KEY_ENV_VAR)
        return key.strip() if key and key.strip() else None

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        load_dotenv(dotenv_path=self._project_root / ".env", override=True)
