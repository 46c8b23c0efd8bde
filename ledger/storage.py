import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ledger.config import STORAGE_FILE

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Whole-snapshot blob store. ``save`` always overwrites."""

    @abstractmethod
    def load(self) -> Optional[dict]:
        pass

    @abstractmethod
    def save(self, snapshot: dict) -> None:
        pass


class MemoryStorage(Storage):

    def __init__(self, snapshot: Optional[dict] = None):
        self._snapshot = copy.deepcopy(snapshot)
        self.saves = 0

    def load(self) -> Optional[dict]:
        return copy.deepcopy(self._snapshot)

    def save(self, snapshot: dict) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.saves += 1


class JsonFileStorage(Storage):

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path or STORAGE_FILE)

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read ledger from %s: %s", self.path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Ledger file %s does not hold an object", self.path)
            return None
        return data

    def save(self, snapshot: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(snapshot, handle, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug("Saved ledger to %s", self.path)
