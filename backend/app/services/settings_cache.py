from __future__ import annotations

import copy
import time
from collections.abc import Callable
from threading import Lock
from typing import Any

from sqlalchemy.orm import Session

from app.models.system_setting import SystemSetting
from app.schemas.settings import DEFAULT_SETTINGS


def load_settings_category(db: Session, category: str) -> dict[str, Any]:
    defaults = DEFAULT_SETTINGS.get(category, {})
    record = db.get(SystemSetting, category)
    if record is None:
        return copy.deepcopy(defaults)
    return {**defaults, **(record.settings or {})}


class SettingsCache:
    """Read-through cache of system settings categories with a fixed TTL.

    One instance is created with the application and handed to whatever needs
    it; writers call ``invalidate`` after changing a category. A value loaded
    while an invalidation happens is returned to its caller but not cached.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float,
        loader: Callable[[Session, str], dict[str, Any]] = load_settings_category,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = max(0.0, ttl_seconds)
        self._loader = loader
        self._clock = clock
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._lock = Lock()

    def _generation(self, category: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(category, 0)

    def get(self, db: Session, category: str) -> dict[str, Any]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(category)
            if entry is not None and entry[0] > now:
                return copy.deepcopy(entry[1])
            generation = self._generation(category)
        value = self._loader(db, category)
        with self._lock:
            if self._generation(category) == generation:
                self._entries[category] = (now + self._ttl, value)
        return copy.deepcopy(value)

    def get_value(self, db: Session, category: str, key: str, default: Any = None) -> Any:
        return self.get(db, category).get(key, default)

    def invalidate(self, category: str | None = None) -> None:
        with self._lock:
            if category is None:
                self._entries.clear()
                self._epoch += 1
            else:
                self._entries.pop(category, None)
                self._generations[category] = self._generations.get(category, 0) + 1
