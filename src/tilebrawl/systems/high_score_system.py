from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from esper import World

from tilebrawl.components.high_score import HighScore
from tilebrawl.events.bus import EVENT_GAME_OVER, EVENT_HIGH_SCORE_CHANGED, EventBus

logger = logging.getLogger(__name__)


class HighScoreSystem:
    """Keeps the best score per session type in a small JSON file."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        session_type: str,
        *,
        save_path: Path | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._save_path = Path(save_path) if save_path is not None else self._default_save_path()
        self._entity = self._ensure_entity(session_type)
        self.event_bus.subscribe(EVENT_GAME_OVER, self._on_game_over)
        self.load()

    @staticmethod
    def _default_save_path() -> Path:
        return Path(__file__).resolve().parents[3] / "data" / "high_scores.json"

    @property
    def save_path(self) -> Path:
        return self._save_path

    def _ensure_entity(self, session_type: str) -> int:
        existing = list(self.world.get_component(HighScore))
        if existing:
            entity, record = existing[0]
            record.session_type = session_type
            return entity
        return self.world.create_entity(HighScore(session_type=session_type))

    def _record(self) -> HighScore:
        return self.world.component_for_entity(self._entity, HighScore)

    def _read_all(self) -> Dict[str, int]:
        try:
            with self._save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning("ignoring unreadable high score file %s", self._save_path)
            return {}
        except OSError as exc:
            logger.warning("could not read high scores from %s: %s", self._save_path, exc)
            return {}
        if not isinstance(payload, dict):
            return {}
        scores: Dict[str, int] = {}
        for key, value in payload.items():
            try:
                scores[str(key)] = int(value)
            except (TypeError, ValueError):
                continue
        return scores

    def load(self) -> int:
        record = self._record()
        record.best = self._read_all().get(record.session_type, 0)
        return record.best

    def save(self) -> bool:
        record = self._record()
        scores = self._read_all()
        scores[record.session_type] = record.best
        try:
            self._save_path.parent.mkdir(parents=True, exist_ok=True)
            with self._save_path.open("w", encoding="utf-8") as handle:
                json.dump(scores, handle, indent=2)
        except OSError as exc:
            logger.warning("could not write high scores to %s: %s", self._save_path, exc)
            return False
        return True

    # Event handlers -----------------------------------------------------

    def _on_game_over(self, sender, **payload) -> None:
        score = payload.get("score")
        if score is None:
            return
        record = self._record()
        if score <= record.best:
            return
        record.best = int(score)
        self.save()
        self.event_bus.emit(EVENT_HIGH_SCORE_CHANGED, session_type=record.session_type, best=record.best)
