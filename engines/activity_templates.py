"""Activity templates and the category-to-game lookup used by learning paths."""

from __future__ import annotations

from typing import Dict, List

from games import GAMES
from schemas import Activity, FactCategory, Game

DEFAULT_GAME_ID = "racing-bears"

# Keys are fact category ids; values are ids in the game catalog (games.py).
GAME_FOR_CATEGORY: Dict[str, str] = {
    "add-plus-minus-1-2": "racing-bears",
    "add-doubles": "doubles-bingo",
    "add-combinations-10": "sum-war",
    "mult-2-5-10": "trios",
    "mult-squares": "three-dice-take",
}


def game_for_category(category_id: str) -> str:
    return GAME_FOR_CATEGORY.get(category_id, DEFAULT_GAME_ID)


def game_details(category_id: str) -> Game:
    """Catalog entry for the game mapped to ``category_id``."""

    game_id = game_for_category(category_id)
    game = GAMES.get(game_id)
    if game is None:
        raise KeyError(f"Game {game_id!r} is not in the game catalog")
    return game


def intensive_activities(category: FactCategory) -> List[Activity]:
    """Strategy lesson, guided practice and a game for a struggling category."""

    return [
        Activity(
            type="strategy-instruction",
            name=f"{category.name} Strategy Lesson",
            description=f"Learn key strategies for {category.name}",
            duration=10,
        ),
        Activity(
            type="practice",
            name="Guided Practice",
            description="Practice with visual supports and prompts",
            duration=15,
        ),
        Activity(
            type="game",
            name="Foundation Game",
            description=f"Play games focused on {category.name}",
            game_id=game_for_category(category.id),
            duration=15,
        ),
    ]


def building_activities(category: FactCategory) -> List[Activity]:
    """Fluency game plus timed practice for a category that is progressing."""

    return [
        Activity(
            type="game",
            name="Fluency Game",
            description=f"Build speed and accuracy with {category.name}",
            game_id=game_for_category(category.id),
            duration=15,
        ),
        Activity(
            type="practice",
            name="Timed Practice",
            description="Work on efficiency with structured timing",
            duration=10,
        ),
    ]


def self_assessment_activities() -> List[Activity]:
    return [
        Activity(
            type="assessment",
            name="Strategy Sorting Assessment",
            description="Sort math facts by how you solve them",
            duration=15,
        )
    ]


__all__ = [
    "DEFAULT_GAME_ID",
    "GAME_FOR_CATEGORY",
    "building_activities",
    "game_details",
    "game_for_category",
    "intensive_activities",
    "self_assessment_activities",
]
