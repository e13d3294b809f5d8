"""Best-effort, versioned persistence of the navigator's view preference."""

from __future__ import annotations

import json
import pathlib
from typing import Any, Protocol

import pydantic
import structlog

from src.organogram.errors import PersistenceUnavailableError
from src.organogram.models import ViewMode, ViewPreference

LOGGER = structlog.get_logger(__name__)

CURRENT_PREFERENCE_VERSION = 2


class PreferenceStorage(Protocol):
    """Key/value string storage, shaped like the browser's localStorage.

    Implementations raise ``PersistenceUnavailableError`` (or ``OSError``)
    when the storage cannot be used.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryPreferenceStorage:
    """In-process storage; ``available=False`` behaves like disabled storage."""

    def __init__(self, initial: dict[str, str] | None = None, *, available: bool = True) -> None:
        self.items: dict[str, str] = dict(initial or {})
        self.available = available

    def get_item(self, key: str) -> str | None:
        if not self.available:
            raise PersistenceUnavailableError("preference storage is disabled")
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not self.available:
            raise PersistenceUnavailableError("preference storage is disabled")
        self.items[key] = value


class FilePreferenceStorage:
    """Stores all keys in one JSON document on disk."""

    def __init__(self, path: str | pathlib.Path) -> None:
        self._path = pathlib.Path(path)

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8-sig") as f:
                data: Any = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PersistenceUnavailableError(
                "preference file is not valid JSON",
                context={"path": str(self._path)},
                cause=exc,
            ) from exc
        if not isinstance(data, dict):
            raise PersistenceUnavailableError(
                "preference file must contain a JSON object",
                context={"path": str(self._path)},
            )
        return data

    def get_item(self, key: str) -> str | None:
        value = self._read_document().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            document = self._read_document()
        except PersistenceUnavailableError:
            # A corrupt document is replaced rather than blocking every save.
            document = {}
        document[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.write("\n")
        tmp_path.replace(self._path)


class PreferenceAdapter:
    """Reads and writes the ``ViewPreference`` under a single storage key.

    ``load`` treats anything unexpected (missing, malformed, other schema
    version, storage failure) as "no preference". ``save`` never raises.
    """

    def __init__(
        self,
        storage: PreferenceStorage,
        *,
        key: str = "kcvv-organogram-view-preference",
        version: int = CURRENT_PREFERENCE_VERSION,
    ) -> None:
        self._storage = storage
        self._key = key
        self._version = version

    @property
    def version(self) -> int:
        return self._version

    def load(self) -> ViewPreference | None:
        try:
            raw = self._storage.get_item(self._key)
        except (PersistenceUnavailableError, OSError) as exc:
            LOGGER.debug("organogram.preference.load_unavailable", key=self._key, error=str(exc))
            return None
        if raw is None:
            return None

        try:
            preference = ViewPreference.model_validate(json.loads(raw))
        except (ValueError, pydantic.ValidationError) as exc:
            LOGGER.debug("organogram.preference.malformed", key=self._key, error=str(exc))
            return None

        if preference.version != self._version:
            LOGGER.debug(
                "organogram.preference.version_mismatch",
                key=self._key,
                stored=preference.version,
                expected=self._version,
            )
            return None
        return preference

    def save(self, preference: ViewPreference | ViewMode) -> bool:
        """Persist a preference (or a bare view mode); returns whether it was written."""
        if not isinstance(preference, ViewPreference):
            preference = ViewPreference(active_view=preference, version=self._version)
        payload = preference.model_dump_json(by_alias=True)
        try:
            self._storage.set_item(self._key, payload)
        except (PersistenceUnavailableError, OSError) as exc:
            LOGGER.debug("organogram.preference.save_failed", key=self._key, error=str(exc))
            return False
        return True


__all__ = [
    "CURRENT_PREFERENCE_VERSION",
    "FilePreferenceStorage",
    "MemoryPreferenceStorage",
    "PreferenceAdapter",
    "PreferenceStorage",
]
