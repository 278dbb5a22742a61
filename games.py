"""Game catalog: the practice games that learning path activities refer to."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from pydantic import ValidationError

from fact_categories import CATALOG_DIR
from schemas import Game

logger = logging.getLogger(__name__)


class GameConfigError(ValueError):
    """Raised when ``games.json`` contains invalid data."""


def _default_path() -> Path:
    override = os.getenv("GAMES_PATH")
    if override:
        return Path(override)
    return CATALOG_DIR / "games.json"


class GameRegistry:
    """Read-only lookup of games by id and by category."""

    def __init__(self, path: str | Path | None = None, *, lazy: bool = False) -> None:
        self._path = Path(path) if path is not None else None
        self._games: Optional[Dict[str, Game]] = None
        if not lazy:
            self.reload()

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else _default_path()

    def reload(self) -> None:
        path = self.path
        if not path.exists():
            raise FileNotFoundError(f"Game file not found: {path}")

        with path.open("r", encoding="utf-8") as fh:
            try:
                raw = json.load(fh)
            except json.JSONDecodeError as exc:
                raise GameConfigError(f"Game file is not valid JSON: {exc}") from exc

        if not isinstance(raw, list) or not raw:
            raise GameConfigError("Game file must contain a non-empty JSON list")

        games: Dict[str, Game] = {}
        for idx, entry in enumerate(raw, start=1):
            if not isinstance(entry, dict):
                raise GameConfigError(f"Game #{idx} must be a JSON object")
            try:
                game = Game.model_validate(entry)
            except ValidationError as exc:
                raise GameConfigError(f"Game #{idx} is invalid: {exc}") from exc
            if game.id in games:
                raise GameConfigError(f"Duplicate game id detected: {game.id}")
            games[game.id] = game

        self._games = games
        logger.debug("Loaded %d games from %s", len(games), path)

    def _loaded(self) -> Dict[str, Game]:
        if self._games is None:
            self.reload()
        return self._games

    @property
    def games(self) -> List[Game]:
        return list(self._loaded().values())

    def ids(self) -> Sequence[str]:
        return tuple(self._loaded())

    def get(self, game_id: str) -> Optional[Game]:
        return self._loaded().get(game_id)

    def by_category(self, category: str) -> List[Game]:
        """Games tagged ``category`` (foundational, derived or advanced), in file order."""

        return [game for game in self._loaded().values() if game.category == category]

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._loaded()

    def __iter__(self) -> Iterator[Game]:
        return iter(self._loaded().values())

    def __len__(self) -> int:
        return len(self._loaded())


GAMES = GameRegistry(lazy=True)
