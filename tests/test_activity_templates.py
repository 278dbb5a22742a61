from engines.activity_templates import (
    DEFAULT_GAME_ID,
    GAME_FOR_CATEGORY,
    building_activities,
    game_details,
    game_for_category,
    intensive_activities,
    self_assessment_activities,
)
from fact_categories import FACT_CATEGORIES
from games import GAMES
from schemas import FactCategory


def test_known_categories_map_to_their_games():
    assert game_for_category("add-plus-minus-1-2") == "racing-bears"
    assert game_for_category("add-doubles") == "doubles-bingo"
    assert game_for_category("add-combinations-10") == "sum-war"
    assert game_for_category("mult-2-5-10") == "trios"
    assert game_for_category("mult-squares") == "three-dice-take"


def test_unmapped_categories_fall_back_to_default_game():
    assert DEFAULT_GAME_ID == "racing-bears"
    assert "mult-0-1" not in GAME_FOR_CATEGORY
    assert game_for_category("mult-0-1") == DEFAULT_GAME_ID
    assert game_for_category("") == DEFAULT_GAME_ID


def test_intensive_template_order_and_game():
    squares = FACT_CATEGORIES.get("mult-squares")
    activities = intensive_activities(squares)

    assert [a.type for a in activities] == ["strategy-instruction", "practice", "game"]
    assert [a.duration for a in activities] == [10, 15, 15]
    assert activities[0].name == "Squares Strategy Lesson"
    assert activities[0].game_id is None
    assert activities[2].game_id == "three-dice-take"
    assert sum(a.duration for a in activities) == 40


def test_building_template_uses_default_game_for_custom_category():
    category = FactCategory(
        id="sub-think-addition",
        operation="subtraction",
        grouping="derived",
        name="Think Addition",
        examples=("12-5",),
    )
    activities = building_activities(category)

    assert [(a.type, a.name, a.duration) for a in activities] == [
        ("game", "Fluency Game", 15),
        ("practice", "Timed Practice", 10),
    ]
    assert activities[0].game_id == DEFAULT_GAME_ID
    assert "Think Addition" in activities[0].description


def test_self_assessment_is_single_fifteen_minute_activity():
    (activity,) = self_assessment_activities()
    assert activity.type == "assessment"
    assert activity.name == "Strategy Sorting Assessment"
    assert activity.duration == 15
    assert activity.game_id is None


def test_every_mapped_game_is_in_the_game_catalog():
    for game_id in [DEFAULT_GAME_ID, *GAME_FOR_CATEGORY.values()]:
        assert game_id in GAMES, game_id
    for category in FACT_CATEGORIES:
        assert game_details(category.id).id == game_for_category(category.id)


def test_game_details_for_mapped_and_unmapped_categories():
    assert game_details("add-doubles").name == "Doubles Bingo"
    assert game_details("mult-0-1").name == "Racing Bears"
