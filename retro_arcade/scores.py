"""
High score persistence.

A ScoreStore maps a game identifier to the best score seen for it. Writes
only take effect when they beat the stored score:

    >>> store = MemoryScoreStore()
    >>> store.set('snake', 100)
    True
    >>> store.set('snake', 50)
    False
    >>> store.get('snake')
    100
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from retro_arcade.logging import get_data_dir, get_logger

log = get_logger('scores')


def default_score_path() -> Path:
    """Default high score file in the platform data directory."""
    return get_data_dir() / 'scores.json'


class ScoreStore(ABC):
    """Get / save-if-higher high scores keyed by game identifier."""

    @abstractmethod
    def get(self, game_id: str) -> int:
        """Return the high score for a game, 0 if none is stored."""
        pass

    @abstractmethod
    def _write(self, game_id: str, score: int) -> None:
        """Unconditionally store a score."""
        pass

    def set(self, game_id: str, score: int) -> bool:
        """Store ``score`` if it beats the current high score.

        Returns:
            True if a new record was set
        """
        current = self.get(game_id)
        if score > current:
            self._write(game_id, score)
            log.info("New high score for %s: %d (was %d)", game_id, score, current)
            return True
        return False


class MemoryScoreStore(ScoreStore):
    """Score store that lives only as long as the process."""

    def __init__(self, initial: Optional[Dict[str, int]] = None):
        self._scores: Dict[str, int] = dict(initial or {})

    def get(self, game_id: str) -> int:
        return self._scores.get(game_id, 0)

    def _write(self, game_id: str, score: int) -> None:
        self._scores[game_id] = score


class JsonScoreStore(ScoreStore):
    """Score store backed by a JSON object on disk.

    The file is read once, lazily. An unreadable or malformed file is
    treated as empty and replaced on the next record. Writes go through a
    temporary file and an atomic rename.

    Args:
        path: JSON file location (default: default_score_path())
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else default_score_path()
        self._scores: Optional[Dict[str, int]] = None

    def _load(self) -> Dict[str, int]:
        if self._scores is not None:
            return self._scores

        self._scores = {}
        if not self.path.exists():
            return self._scores

        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Ignoring unreadable score file %s: %s", self.path, e)
            return self._scores

        if not isinstance(data, dict):
            log.warning("Ignoring score file %s: expected an object", self.path)
            return self._scores

        for game_id, value in data.items():
            try:
                self._scores[str(game_id)] = int(value)
            except (TypeError, ValueError):
                log.warning("Ignoring non-integer score for %s in %s", game_id, self.path)
        return self._scores

    def get(self, game_id: str) -> int:
        return self._load().get(game_id, 0)

    def _write(self, game_id: str, score: int) -> None:
        # The cache only changes once the file is in place
        scores = {**self._load(), game_id: score}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(scores, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise
        self._scores = scores
