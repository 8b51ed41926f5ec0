"""Per-plugin result caches."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Key-value store holding the results of one plugin."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryCache:
    """Cache store that lives for the lifetime of the process."""

    def __init__(self, config_name: str):
        self.config_name = config_name
        self._data: Dict[str, Any] = {}

    def has(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class CacheConf:
    """Cache store persisted to ``<cache_dir>/<config_name>.json``.

    File format:
    {
        "weather london": [{"title": "London", "subtitle": "12°C", ...}],
        "": []
    }
    """

    def __init__(self, config_name: str, cache_dir: Path):
        self.config_name = config_name
        self.cache_file = Path(cache_dir) / f"{config_name}.json"
        self._data: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        """Load cache from file, starting empty if missing or corrupt."""
        if self.cache_file.exists():
            try:
                with open(self.cache_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.error(f"Cache file {self.cache_file} is not an object, starting empty")
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Error loading plugin cache {self.cache_file}: {e}")

        return {}

    def _save(self) -> None:
        """Save cache to file."""
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_file, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved plugin cache to {self.cache_file}")

    @property
    def data(self) -> Dict[str, Any]:
        if self._data is None:
            self._data = self._load()
        return self._data

    def has(self, key: str) -> bool:
        return key in self.data

    def get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value
        try:
            self._save()
        except OSError as e:
            # The in-memory copy still serves this process
            logger.error(f"Error saving plugin cache {self.cache_file}: {e}")

    def clear(self) -> None:
        self._data = {}
        self._save()
