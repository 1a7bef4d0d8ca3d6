import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict


logger = logging.getLogger(__name__)


def config_debug_enabled() -> bool:
    return os.getenv("SAVE2READ_CONFIG_DEBUG", "").lower() == "true"


def env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    return max(minimum, value)


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


class JsonFileConfig:
    """
    Small JSON document on disk, re-read when its mtime changes.

    Writers take ``self._lock`` and re-load from disk before mutating so
    concurrent processes sharing the file don't clobber each other's keys.
    """

    def __init__(self, path: str, *, debug_label: str) -> None:
        self._debug_label = debug_label
        self._path = Path(path)
        self._lock = Lock()
        self._data = self._load_from_disk()
        self._last_mtime = self._get_mtime()
        if config_debug_enabled():
            logger.info("[%s] path=%s %s", self._debug_label, self._path, self._debug_message())

    def _debug_message(self) -> str:
        return ""

    def _load_from_disk(self) -> Dict[str, Any]:
        if not self._path.exists():
            return self._default_data()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("[%s] failed to parse %s: %s", self._debug_label, self._path, exc)
            return self._default_data()
        if not isinstance(data, dict):
            logger.warning("[%s] %s is not a JSON object", self._debug_label, self._path)
            return self._default_data()
        return data

    def _write_to_disk(self, data: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        self._last_mtime = self._get_mtime()

    def _default_data(self) -> Dict[str, Any]:
        return {}

    def _get_mtime(self) -> float | None:
        try:
            return self._path.stat().st_mtime
        except FileNotFoundError:
            return None

    def _refresh_if_changed(self) -> None:
        current = self._get_mtime()
        if current is None or current == self._last_mtime:
            return
        self._data = self._load_from_disk()
        self._last_mtime = current
        if config_debug_enabled():
            logger.info("[%s] reloaded %s", self._debug_label, self._debug_message())
