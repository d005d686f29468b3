"""Local key-value storage backed by a single JSON file."""

import json
import os
import tempfile
from pathlib import Path


class LocalStorage:
    """String key-value store persisted as one JSON object on disk.

    Every write rewrites the whole file atomically. Reads go to disk each
    time, so several storage instances over one path see each other's
    writes.

    Attributes:
        path: Location of the JSON file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None when unset."""
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        """Delete key; missing keys are ignored."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def _save(self, data: dict[str, str]) -> None:
        """Atomically save storage to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.stem}-",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
