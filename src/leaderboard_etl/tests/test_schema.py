import pytest

from leaderboard_etl.errors import SchemaError
from leaderboard_etl.schema import Role, detect_columns, resolve_columns


def test_aliases_case_insensitive():
    mapping = detect_columns(["Rank", "Player", "Total"])
    assert (mapping.rank_index, mapping.username_index, mapping.wagered_index) == (0, 1, 2)


def test_cells_are_trimmed_and_extra_columns_ignored():
    mapping = detect_columns(["  country ", " POSITION ", "Amount", "name "])
    assert mapping.rank_index == 1
    assert mapping.username_index == 3
    assert mapping.wagered_index == 2


def test_missing_wagered_raises():
    with pytest.raises(SchemaError, match="wagered"):
        detect_columns(["Rank", "Player"])


def test_match_is_exact_not_substring():
    mapping = resolve_columns(["ranking", "username", "wagered"])
    assert mapping.rank_index is None
    assert mapping.unresolved == [Role.RANK]


def test_first_matching_cell_wins():
    assert detect_columns(["user", "name", "rank", "wager"]).username_index == 0
