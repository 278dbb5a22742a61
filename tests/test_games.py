import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from games import GAMES, GameConfigError, GameRegistry


def _game(game_id: str, **overrides) -> dict:
    entry = {
        "id": game_id,
        "name": game_id.title(),
        "description": "",
        "operation": "addition",
        "category": "foundational",
        "targetFacts": ["+1"],
        "emoji": "",
        "difficulty": "beginner",
    }
    entry.update(overrides)
    return entry


def test_default_catalog_is_seeded():
    assert GAMES.ids() == (
        "racing-bears",
        "doubles-bingo",
        "trios",
        "sum-war",
        "salute",
        "three-dice-take",
    )
    trios = GAMES.get("trios")
    assert trios.name == "Trios"
    assert trios.operation == "multiplication"
    assert trios.target_facts == ("×2", "×5", "×10")
    assert trios.difficulty == "intermediate"
    assert GAMES.get("chess") is None
    assert "salute" in GAMES


def test_by_category_filters_in_file_order():
    assert [g.id for g in GAMES.by_category("foundational")] == [
        "racing-bears",
        "doubles-bingo",
        "trios",
    ]
    assert [g.id for g in GAMES.by_category("derived")] == ["sum-war", "salute"]
    assert [g.id for g in GAMES.by_category("advanced")] == ["three-dice-take"]
    assert GAMES.by_category("expert") == []


def test_games_are_immutable_and_serialise_camel_case():
    game = GAMES.get("racing-bears")
    with pytest.raises(ValidationError):
        game.name = "Slow Bears"
    payload = game.model_dump(mode="json", by_alias=True)
    assert payload["targetFacts"] == ["+0", "+1", "+2"]


def test_environment_override(tmp_path: Path, monkeypatch):
    cfg = tmp_path / "games.json"
    cfg.write_text(json.dumps([_game("only-game")]), encoding="utf-8")
    monkeypatch.setenv("GAMES_PATH", str(cfg))
    assert GameRegistry().ids() == ("only-game",)


@pytest.mark.parametrize(
    "payload",
    [
        {"id": "not-a-list"},
        [],
        [42],
        [_game("dup"), _game("dup")],
        [_game("bad-category", category="legendary")],
        [_game("bad-difficulty", difficulty="impossible")],
    ],
)
def test_invalid_catalogs_are_rejected(tmp_path: Path, payload):
    cfg = tmp_path / "broken.json"
    cfg.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(GameConfigError):
        GameRegistry(cfg)


def test_malformed_json_and_missing_file(tmp_path: Path):
    garbled = tmp_path / "garbled.json"
    garbled.write_text("{", encoding="utf-8")
    with pytest.raises(GameConfigError):
        GameRegistry(garbled)
    with pytest.raises(FileNotFoundError):
        GameRegistry(tmp_path / "absent.json")
    lazy = GameRegistry(tmp_path / "absent.json", lazy=True)
    with pytest.raises(FileNotFoundError):
        lazy.get("racing-bears")
