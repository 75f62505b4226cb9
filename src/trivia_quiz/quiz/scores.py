"""Persisted best-score storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "highScore"


class ScoreStoreError(RuntimeError):
    """Raised when the score file cannot be written."""


class ScoreStore:
    """Single best-score value stored as a JSON object on disk.

    Unreadable or malformed files read as 0 so a damaged file never blocks a
    quiz; the next `record` rewrites it.
    """

    def __init__(self, path: Path, *, key: str = HIGH_SCORE_KEY) -> None:
        self.path = path
        self.key = key

    def get(self) -> int:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except OSError as exc:
            logger.warning(
                "Unable to read high score",
                extra={"path": self.path, "error": str(exc)},
            )
            return 0
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(
                "Ignoring malformed high score file",
                extra={"path": self.path},
            )
            return 0
        value = data.get(self.key) if isinstance(data, dict) else None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return 0
        return value

    def set(self, value: int) -> None:
        if value < 0:
            raise ValueError("High score cannot be negative.")
        data = self._load_mapping()
        data[self.key] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise ScoreStoreError(
                f"Unable to write high score to {self.path}"
            ) from exc

    def record(self, score: int) -> int:
        """Store ``max(current, score)`` and return it."""

        current = self.get()
        best = max(current, score)
        if best != current or not self.path.exists():
            self.set(best)
            logger.info(
                "High score updated",
                extra={"previous": current, "high_score": best},
            )
        return best

    def reset(self) -> None:
        self.set(0)

    def _load_mapping(self) -> dict[str, object]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}
