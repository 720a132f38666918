"""Configuration store implementations."""

import json
import threading
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from .base import ConfigStore
from .models import ConfigRecord


class InMemoryConfigStore(ConfigStore):
    """Configuration held in process memory only."""

    def __init__(self, initial: ConfigRecord | None = None):
        self._record = initial or ConfigRecord()
        self._lock = threading.Lock()

    def get(self) -> ConfigRecord:
        with self._lock:
            return self._record.model_copy()

    def set(self, partial: dict[str, Any]) -> ConfigRecord:
        with self._lock:
            self._record = self._record.merged(partial)
            return self._record.model_copy()

    @property
    def backend_type(self) -> str:
        return "memory"


class JsonFileConfigStore(ConfigStore):
    """Configuration persisted to a JSON file after every write.

    On start the file is loaded; a missing file is created with defaults,
    and an unreadable one is logged and overwritten with defaults.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._record = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> ConfigRecord:
        with self._lock:
            return self._record.model_copy()

    def set(self, partial: dict[str, Any]) -> ConfigRecord:
        with self._lock:
            self._record = self._record.merged(partial)
            self._save()
            logger.info(f"Configuration updated: {', '.join(sorted(partial)) or 'no fields'}")
            return self._record.model_copy()

    @property
    def backend_type(self) -> str:
        return "json"

    def _load(self) -> ConfigRecord:
        if not self._path.exists():
            self._record = ConfigRecord()
            self._save()
            return self._record

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            record = ConfigRecord.model_validate(data)
            logger.info(f"Configuration loaded from {self._path}")
            return record
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error loading configuration from {self._path}: {e}")
            self._record = ConfigRecord()
            self._save()
            return self._record

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._record.to_wire(), indent=2), encoding="utf-8"
            )
            logger.debug(f"Configuration saved to {self._path}")
        except OSError as e:
            logger.error(f"Error saving configuration to {self._path}: {e}")
