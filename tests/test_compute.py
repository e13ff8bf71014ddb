import pytest

from leaderboard.compute import (
    detect_record_column,
    infer_roles,
    normalize_rows,
    order_records,
    parse_int,
    parse_rank,
    resolve_header,
    resolve_layout,
)
from leaderboard.report.constants import SCHEMAS
from leaderboard.report.models import ColumnLayout, CompetitorRecord, RoleMap

RANKED = SCHEMAS["ranked"]
RECORD = SCHEMAS["record"]
WLT = SCHEMAS["wlt"]


@pytest.mark.parametrize(
    "raw,expected",
    [("12", 12), (" 3 ", 3), ("-2", -2), ("3.5", None), ("", None), ("abc", None), (None, None)],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw,expected", [("#1", 1), ("2.", 2), ("T3", 3), ("4th", 4), ("x", None)])
def test_parse_rank_tolerates_decorations(raw, expected):
    assert parse_rank(raw) == expected


def test_explicit_header_short_circuits_heuristics():
    header = ["#", "Name", "Pts", "W", "L"]
    # Contents deliberately misleading: every column looks like something else
    data = [
        ["Zed", "10", "a long text cell", "x", "1"],
        ["Yan", "11", "another long cell", "y", "2"],
    ]
    roles = infer_roles(header, data, RANKED)
    assert roles == RoleMap(rank=0, name=1, points=2, wins=3, losses=4)


def test_partial_labels_resolve_in_tier_two():
    header = ["Pos.", "Player Name", "Games Won", "Games Lost", "Total Points"]
    data = [["1", "Alice", "5", "2", "17"]]
    roles = infer_roles(header, data, RANKED)
    assert roles == RoleMap(rank=0, name=1, wins=2, losses=3, points=4)


def test_synthesized_header_when_first_row_is_data():
    rows = [["1", "Alice", "5", "2", "17"], ["2", "Bob", "4", "3", "12"]]
    table = resolve_header(rows, RANKED)
    assert table[0] == ["Rank", "Name", "W", "L", "Pts"]
    assert table[1:] == rows
    roles = infer_roles(table[0], table[1:], RANKED)
    assert roles == RoleMap(rank=0, name=1, wins=2, losses=3, points=4)


def test_synthesized_header_is_cut_to_row_width():
    table = resolve_header([["Alice", "5"]], RECORD)
    assert table[0] == ["Name", "W"]


def test_real_header_is_kept():
    rows = [["Player", "W", "L"], ["Alice", "5", "2"]]
    assert resolve_header(rows, RECORD) == rows


def test_statistical_rank_name_and_counts():
    header = ["x", "y", "z", "q"]
    data = [
        ["1", "Ann", "40", "9"],
        ["2", "Ben", "35", "12"],
        ["3", "Cy", "20", "30"],
        ["4", "Di", "10", "45"],
    ]
    roles = infer_roles(header, data, RANKED)
    assert roles.name == 1
    assert roles.rank == 0
    # Equal small-integer and numeric counts; lower maximum goes to wins
    assert roles.wins == 2 and roles.losses == 3


def test_count_columns_prefer_small_integers():
    header = ["Team", "GP", "A", "B"]
    data = [
        ["Reds", "10", "7", "3"],
        ["Blues", "10", "5", "5"],
        ["Greens", "10", "2", "8"],
    ]
    roles = infer_roles(header, data, RECORD)
    assert roles.name == 0
    assert roles.wins == 2 and roles.losses == 3


def test_large_values_are_not_game_counts():
    header = ["Name", "A", "B", "C"]
    data = [
        ["Ann", "1200", "5", "0"],
        ["Ben", "1100", "3", "2"],
        ["Cy", "900", "1", "4"],
    ]
    roles = infer_roles(header, data, RECORD)
    assert 1 not in (roles.wins, roles.losses)
    assert {roles.wins, roles.losses} == {2, 3}


def test_ties_only_guessed_when_schema_tracks_them():
    header = ["Name", "a", "b", "c"]
    data = [["Ann", "5", "2", "1"], ["Ben", "3", "4", "0"]]
    assert infer_roles(header, data, RECORD).ties is None
    assert infer_roles(header, data, WLT).ties is not None


@pytest.mark.parametrize(
    "header,data",
    [
        (["1", "2", "3"], [["1", "2", "3"]]),
        (["W", "L"], [["3", "1"]]),
        (["", ""], []),
        (["Pts"], [["7"], ["9"]]),
        (["a", "b", "c"], [["Ann", "4-1"], ["Ben"]]),
    ],
)
def test_name_always_resolves_and_roles_never_collide(header, data):
    for schema in SCHEMAS.values():
        roles = infer_roles(header, data, schema)
        assert roles.name is not None
        resolved = [i for i in roles.as_dict().values() if i is not None]
        assert len(resolved) == len(set(resolved))


def test_name_takes_column_from_claimed_role():
    roles = infer_roles(["W", "L"], [["3", "1"]], RECORD)
    assert roles.name == 0
    assert roles.losses == 1
    assert roles.wins is None


def test_empty_table_leaves_name_unresolved():
    assert infer_roles([], [], RECORD).name is None


def test_record_column_precedence():
    header = ["Name", "Record"]
    data = [[f"P{i}", f"{i}-{10 - i}"] for i in range(8)] + [["P8", "n/a"], ["P9", "7"]]
    layout = resolve_layout(header, data, RECORD)
    assert layout.record_column == 1
    records = normalize_rows(data, layout, RECORD)
    assert (records[3].wins, records[3].losses) == (3, 7)
    assert (records[8].wins, records[8].losses) == (0, 0)
    # Integer-only cell in the record column still resolves through the capture
    assert (records[9].wins, records[9].losses) == (0, 0)


def test_record_column_accepts_colon_separator():
    data = [["Ann", "4:1"], ["Ben", "3:2"]]
    assert detect_record_column(data, RoleMap(name=0), RECORD) == 1


def test_record_column_three_fields_for_ties_schema():
    header = ["Team", "Record"]
    data = [["Reds", "4-1-0"], ["Blues", "3-1-1"]]
    layout = resolve_layout(header, data, WLT)
    assert layout.record_column == 1
    records = normalize_rows(data, layout, WLT)
    assert (records[1].wins, records[1].losses, records[1].ties) == (3, 1, 1)
    # Two-field tokens do not satisfy a three-field schema
    assert detect_record_column([["Ann", "4-1"]], RoleMap(name=0), WLT) is None


def test_record_column_skipped_when_counts_explicit():
    header = ["Name", "W", "L", "Record"]
    data = [["Ann", "5", "2", "4-1"], ["Ben", "3", "4", "2-2"]]
    layout = resolve_layout(header, data, RECORD)
    assert layout.record_column is None
    assert normalize_rows(data, layout, RECORD)[0].wins == 5


def test_record_column_hit_rate_must_exceed_threshold():
    data = [["A", "1-0"], ["B", "2-0"], ["C", "3-0"], ["D", "x"], ["E", "y"]]
    # 3 of 5 is exactly 0.6, not above it
    assert detect_record_column(data, RoleMap(name=0), RECORD) is None


def test_normalize_defaults_and_narrow_rows():
    layout = ColumnLayout(roles=RoleMap(rank=0, name=1, points=2, wins=3, losses=4))
    data = [
        ["1", "  Alice ", "17", "5", "two"],
        ["2", "Bob"],
        [],
    ]
    records = normalize_rows(data, layout, RANKED)
    assert records[0] == CompetitorRecord(name="Alice", rank=1, wins=5, losses=0, points="17")
    assert records[1] == CompetitorRecord(name="Bob", rank=2, wins=0, losses=0, points="")
    assert records[2] == CompetitorRecord(name="", rank=None, points="")


def test_normalize_unresolved_rank_and_points_are_absent():
    layout = ColumnLayout(roles=RoleMap(name=0, wins=1, losses=2))
    rec = normalize_rows([["Ann", "1", "2"]], layout, RECORD)[0]
    assert rec.rank is None and rec.points is None


def test_normalize_respects_max_rows():
    layout = ColumnLayout(roles=RoleMap(name=0))
    data = [[f"P{i}"] for i in range(20)]
    assert len(normalize_rows(data, layout, RECORD, max_rows=12)) == 12
    assert len(normalize_rows(data, layout, RECORD)) == 20


def _rec(name, wins=0, losses=0, rank=None):
    return CompetitorRecord(name=name, rank=rank, wins=wins, losses=losses)


def test_win_loss_name_order():
    records = [_rec("A", 3, 1), _rec("B", 3, 0), _rec("C", 5, 2)]
    ordered = order_records(records, "win-loss-name")
    assert [r.name for r in ordered] == ["C", "B", "A"]


def test_win_loss_name_order_breaks_ties_by_name():
    records = [_rec("bob", 2, 2), _rec("Bob", 2, 2), _rec("al", 2, 2)]
    ordered = order_records(records, "win-loss-name")
    assert [r.name for r in ordered] == ["Bob", "al", "bob"]


def test_rank_order_is_stable_and_keeps_unranked_slots():
    records = [_rec("c", rank=3), _rec("x"), _rec("a", rank=1), _rec("b1", rank=2), _rec("b2", rank=2)]
    ordered = order_records(records, "rank")
    assert [r.name for r in ordered] == ["a", "x", "b1", "b2", "c"]


def test_rank_order_noop_when_rank_unresolved():
    records = [_rec("c", rank=3), _rec("a", rank=1)]
    assert order_records(records, "rank", rank_resolved=False) == records


def test_source_order_keeps_input():
    records = [_rec("b", 1), _rec("a", 9)]
    assert order_records(records, "source") == records


def test_unknown_order_raises():
    with pytest.raises(ValueError):
        order_records([], "alphabetical")


def test_record_column_beats_statistical_count_guesses():
    header = ["Player", "Record", "GP", "Streak"]
    data = [["Ann", "4-1", "5", "2"], ["Ben", "3-2", "5", "1"], ["Cy", "1-4", "5", "3"]]
    layout = resolve_layout(header, data, RECORD)
    assert layout.record_column == 1
    # GP and Streak are numeric but must not be read as wins/losses
    assert layout.roles.wins is None and layout.roles.losses is None
    records = normalize_rows(data, layout, RECORD)
    assert [(r.wins, r.losses) for r in records] == [(4, 1), (3, 2), (1, 4)]


def test_statistical_counts_never_take_labelled_columns():
    header = ["Name", "Pts", "x"]
    data = [["Ann", "3", "2"], ["Bob", "3", "0"]]
    roles = infer_roles(header, data, RECORD)
    assert roles.points == 1
    assert roles.wins == 2
    assert roles.losses is None
