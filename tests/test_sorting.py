"""
Unit tests for multi-key window sorting and the position-sort grammar.

Tests cover:
- Identity ordering when no key is active
- pid / title / position keys with both directions
- Key priority and index tie-break
- parse_position_sort, parse_sort_direction, parse_sort_criteria
"""

import pytest

from winquery.errors import ParseError, ParseErrorReason
from winquery.models import Axis, SortCriteria, SortDirection
from winquery.sorting import (
    parse_position_sort,
    parse_sort_criteria,
    parse_sort_direction,
    sort_records,
)
from winquery.store import snapshot

from conftest import indices

ASC = SortDirection.ASCENDING
DESC = SortDirection.DESCENDING
IGNORE = SortDirection.IGNORE


class TestSortRecords:
    """Ordering over the five-window fixture."""

    def test_no_active_keys_keeps_input_order(self, windows):
        assert sort_records(windows, SortCriteria()) == list(windows)

        shuffled = [windows[2], windows[0], windows[4], windows[1], windows[3]]
        assert sort_records(shuffled, SortCriteria()) == shuffled

    def test_all_ignore_position_is_inactive(self, windows):
        criteria = SortCriteria(position=((Axis.X, IGNORE),))
        assert not criteria.is_active()
        assert sort_records(list(reversed(windows)), criteria) == list(reversed(windows))

    def test_pid_ascending_ties_fall_back_to_index(self, windows):
        assert indices(sort_records(windows, SortCriteria(pid=ASC))) == [5, 2, 4, 1, 3]

    def test_pid_descending_ties_still_ascending_index(self, windows):
        assert indices(sort_records(windows, SortCriteria(pid=DESC))) == [3, 1, 2, 4, 5]

    def test_tie_break_ignores_input_order(self, windows):
        shuffled = [windows[3], windows[1], windows[0], windows[4], windows[2]]
        assert indices(sort_records(shuffled, SortCriteria(pid=ASC))) == [5, 2, 4, 1, 3]

    def test_title_ascending_and_descending(self, windows):
        assert indices(sort_records(windows, SortCriteria(title=ASC))) == [5, 4, 2, 1, 3]
        assert indices(sort_records(windows, SortCriteria(title=DESC))) == [3, 1, 2, 4, 5]

    def test_position_single_axis(self, windows):
        criteria = SortCriteria(position=((Axis.X, ASC),))
        assert indices(sort_records(windows, criteria)) == [2, 5, 1, 3, 4]

    def test_position_two_axes(self, windows):
        criteria = SortCriteria(position=((Axis.X, ASC), (Axis.Y, DESC)))
        assert indices(sort_records(windows, criteria)) == [5, 2, 1, 3, 4]

        criteria = SortCriteria(position=((Axis.X, DESC), (Axis.Y, ASC)))
        assert indices(sort_records(windows, criteria)) == [4, 3, 1, 2, 5]

    def test_pid_outranks_title(self, windows):
        criteria = SortCriteria(pid=DESC, title=ASC)
        assert indices(sort_records(windows, criteria)) == [3, 1, 4, 2, 5]

    def test_pid_then_position(self, windows):
        criteria = SortCriteria(pid=ASC, position=((Axis.X, DESC),))
        assert indices(sort_records(windows, criteria)) == [5, 4, 2, 1, 3]

    def test_title_case_policy(self):
        rows = [
            (1, "apple", "", 1, "", "", 0, 0),
            (2, "Banana", "", 1, "", "", 0, 0),
        ]
        records = snapshot(rows)
        assert [r.title for r in sort_records(records, SortCriteria(title=ASC))] == ["apple", "Banana"]
        assert [r.title for r in sort_records(records, SortCriteria(title=ASC), case_sensitive=True)] == ["Banana", "apple"]

    def test_returns_new_list(self, windows):
        result = sort_records(windows, SortCriteria(pid=ASC))
        assert indices(windows) == [1, 2, 3, 4, 5]
        assert result is not windows


class TestParsePositionSort:
    """The 'x1|y-1' grammar."""

    def test_two_axes(self):
        assert parse_position_sort("x1|y-1") == ((Axis.X, ASC), (Axis.Y, DESC))

    @pytest.mark.parametrize("text, expected", [
        ("x1", ((Axis.X, ASC),)),
        ("y-1", ((Axis.Y, DESC),)),
        ("x", ((Axis.X, ASC),)),
        ("x+1", ((Axis.X, ASC),)),
        ("y-", ((Axis.Y, DESC),)),
        (" Y1 | X-1 ", ((Axis.Y, ASC), (Axis.X, DESC))),
    ])
    def test_valid_forms(self, text, expected):
        assert parse_position_sort(text) == expected

    @pytest.mark.parametrize("text, reason", [
        ("", ParseErrorReason.EMPTY_INPUT),
        ("   ", ParseErrorReason.EMPTY_INPUT),
        ("x1|", ParseErrorReason.EMPTY_INPUT),
        ("z1", ParseErrorReason.UNKNOWN_AXIS),
        ("x1|w-1", ParseErrorReason.UNKNOWN_AXIS),
        ("x1|y1|x-1", ParseErrorReason.TOO_MANY_AXES),
        ("x1|x-1", ParseErrorReason.DUPLICATE_AXIS),
        ("x2", ParseErrorReason.INVALID_DIRECTION),
        ("y-1x", ParseErrorReason.INVALID_DIRECTION),
    ])
    def test_errors(self, text, reason):
        with pytest.raises(ParseError) as exc_info:
            parse_position_sort(text)
        assert exc_info.value.reason is reason

    def test_error_carries_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse_position_sort("x1|z-1")
        assert exc_info.value.token == "z-1"
        assert "z-1" in str(exc_info.value)


class TestDirectionParsing:
    """Signed-integer and word directions at the text boundary."""

    @pytest.mark.parametrize("text, expected", [
        ("1", ASC), (1, ASC), ("asc", ASC),
        ("-1", DESC), (-1, DESC), ("DESC", DESC),
        ("0", IGNORE), (None, IGNORE), ("", IGNORE),
    ])
    def test_directions(self, text, expected):
        assert parse_sort_direction(text) is expected

    def test_invalid_direction(self):
        with pytest.raises(ParseError) as exc_info:
            parse_sort_direction("2")
        assert exc_info.value.reason is ParseErrorReason.INVALID_DIRECTION

    def test_parse_sort_criteria(self):
        criteria = parse_sort_criteria(pid="-1", position="y1")
        assert criteria == SortCriteria(pid=DESC, title=IGNORE, position=((Axis.Y, ASC),))
        assert parse_sort_criteria() == SortCriteria()
