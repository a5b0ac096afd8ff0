import json

from draws.schema import LottoGame
from draws.validate import has_required_fields, parse_draw_date, sort_draws, validate_draws


def _draw(date, game="Lotto", numbers=None, **extra):
    item = {"id": date, "game": game, "date": date, "numbers": numbers if numbers is not None else [1, 2, 3]}
    item.update(extra)
    return item


def test_only_complete_records_are_kept():
    payload = json.loads(
        '{"draws":[{"game":"Lotto","date":"2026-02-01","numbers":[1,2,3]},'
        '{"game":"","date":"2026-02-02","numbers":[]},{"numbers":[4]}]}'
    )
    draws = validate_draws(payload)
    assert len(draws) == 1
    assert draws[0].game is LottoGame.LOTTO
    assert draws[0].date == "2026-02-01"
    assert draws[0].numbers == [1, 2, 3]


def test_sorted_by_date_descending():
    payload = {"draws": [_draw("2026-01-01"), _draw("2026-02-15"), _draw("2026-01-20")]}
    assert [d.date for d in validate_draws(payload)] == ["2026-02-15", "2026-01-20", "2026-01-01"]


def test_equal_dates_keep_input_order():
    payload = {
        "draws": [
            _draw("2026-02-01", game="Lotto"),
            _draw("2026-02-03", game="PowerBall"),
            _draw("2026-02-01", game="Lotto Plus 1"),
            _draw("2026-02-01", game="Lotto Plus 2"),
        ]
    }
    games = [d.game.value for d in validate_draws(payload)]
    assert games == ["PowerBall", "Lotto", "Lotto Plus 1", "Lotto Plus 2"]


def test_unparsable_dates_sort_last_in_input_order():
    payload = {
        "draws": [
            _draw("2026-01-01"),
            _draw("pending", game="Lotto"),
            _draw("2026-02-15"),
            _draw("??", game="PowerBall"),
        ]
    }
    dates = [d.date for d in validate_draws(payload)]
    assert dates == ["2026-02-15", "2026-01-01", "pending", "??"]


def test_empty_numbers_are_valid_but_missing_numbers_are_not():
    payload = {"draws": [_draw("2026-02-01", numbers=[]), {"game": "Lotto", "date": "2026-02-02"}]}
    draws = validate_draws(payload)
    assert [d.date for d in draws] == ["2026-02-01"]
    assert draws[0].numbers == []


def test_zero_valued_optionals_are_present():
    payload = {"draws": [_draw("2026-02-01", bonusBall=0, jackpotAmount=0)]}
    draw = validate_draws(payload)[0]
    assert draw.bonus_ball == 0
    assert draw.jackpot_amount == 0
    assert draw.special_ball == 0


def test_records_failing_typed_validation_are_dropped():
    payload = {
        "draws": [
            _draw("2026-02-01", numbers=["x"]),
            _draw("2026-02-02", game="Mega Millions"),
            None,
            "Lotto",
            _draw("2026-02-04"),
        ]
    }
    assert [d.date for d in validate_draws(payload)] == ["2026-02-04"]


def test_malformed_optionals_are_nulled_and_record_kept():
    payload = {
        "draws": [
            {"id": "1", "game": "Lotto", "date": "2026-02-01", "numbers": [1, 2], "jackpotAmount": "R12 000 000"},
            _draw("2026-02-03", bonusBall="seven", jackpotAmount="12500000.50"),
            _draw("2026-02-02", game="PowerBall", powerBall=[5], bonusBall="7"),
        ]
    }
    draws = validate_draws(payload)
    assert [d.date for d in draws] == ["2026-02-03", "2026-02-02", "2026-02-01"]
    assert draws[0].bonus_ball is None
    assert draws[0].jackpot_amount == 12500000.5
    assert draws[1].power_ball is None
    assert draws[1].bonus_ball == 7
    assert draws[2].jackpot_amount is None
    assert draws[2].numbers == [1, 2]
    assert "jackpotAmount" not in draws[2].to_dict()


def test_game_match_is_lenient_on_case_and_spacing():
    payload = {"draws": [_draw("2026-02-01", game="  powerball   plus ")]}
    assert validate_draws(payload)[0].game is LottoGame.POWERBALL_PLUS


def test_missing_or_wrong_draws_key_yields_no_records():
    assert validate_draws({}) == []
    assert validate_draws({"draws": {"game": "Lotto"}}) == []
    assert validate_draws([_draw("2026-02-01")]) == []
    assert validate_draws(None) == []


def test_has_required_fields():
    assert has_required_fields(_draw("2026-02-01", numbers=[])) is True
    assert has_required_fields({"game": "Lotto", "date": "", "numbers": []}) is False
    assert has_required_fields({"game": "Lotto", "date": "2026-02-01", "numbers": "1,2"}) is False
    assert has_required_fields(None) is False


def test_parse_draw_date():
    assert parse_draw_date("2026-02-01").year == 2026
    assert parse_draw_date("pending") is None
    assert parse_draw_date("today") is None
    assert parse_draw_date("now") is None


def test_date_words_are_unparsable_not_current_time():
    payload = {"draws": [_draw("2020-01-01"), _draw("today"), _draw("now")]}
    assert [d.date for d in validate_draws(payload)] == ["2020-01-01", "today", "now"]


def test_records_are_not_mutated():
    payload = {"draws": [_draw("2026-02-01", extra_field="ignored")]}
    draw = validate_draws(payload)[0]
    assert draw.to_dict() == {
        "id": "2026-02-01",
        "game": "Lotto",
        "date": "2026-02-01",
        "numbers": [1, 2, 3],
    }
    assert payload["draws"][0]["extra_field"] == "ignored"


def test_sort_draws_accepts_any_iterable():
    payload = {"draws": [_draw("2026-01-01"), _draw("2026-03-01")]}
    draws = validate_draws(payload)
    assert [d.date for d in sort_draws(reversed(draws))] == ["2026-03-01", "2026-01-01"]
