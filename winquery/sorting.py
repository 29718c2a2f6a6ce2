"""
sorting.py - Multi-key window ordering and the position-sort grammar.

Keys are applied in fixed priority: pid, title, then the position axes in the
order they were declared. Records equal on every active key are ordered by
their snapshot `index`, so the result is a deterministic total order. With no
active key the input order is returned untouched.

Position sort strings look like "x1", "y-1" or "x1|y-1": an axis letter
followed by a direction suffix ("1", "+1", "+" or nothing for ascending,
"-1" or "-" for descending), at most two tokens joined by "|".
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from operator import attrgetter

from winquery.errors import ParseError, ParseErrorReason
from winquery.logger import get_logger, log_debug
from winquery.models import Axis, AxisOrder, SortCriteria, SortDirection, WindowRecord

logger = get_logger(__name__)

MAX_POSITION_AXES = 2

_ASCENDING_SUFFIXES = frozenset({"", "1", "+1", "+"})
_DESCENDING_SUFFIXES = frozenset({"-1", "-"})

_DIRECTION_WORDS: dict[str, SortDirection] = {
    "1": SortDirection.ASCENDING,
    "+1": SortDirection.ASCENDING,
    "asc": SortDirection.ASCENDING,
    "ascending": SortDirection.ASCENDING,
    "-1": SortDirection.DESCENDING,
    "desc": SortDirection.DESCENDING,
    "descending": SortDirection.DESCENDING,
    "0": SortDirection.IGNORE,
    "": SortDirection.IGNORE,
    "none": SortDirection.IGNORE,
}

type SortKey = Callable[[WindowRecord], object]


def _title_key(case_sensitive: bool) -> SortKey:
    if case_sensitive:
        return attrgetter("title")
    return lambda record: record.title.casefold()


_AXIS_KEYS: dict[Axis, SortKey] = {
    Axis.X: attrgetter("position.x"),
    Axis.Y: attrgetter("position.y"),
}


def _active_steps(criteria: SortCriteria, case_sensitive: bool) -> list[tuple[SortKey, SortDirection]]:
    """Comparison steps in priority order, IGNORE keys dropped."""
    steps: list[tuple[SortKey, SortDirection]] = []
    if criteria.pid is not SortDirection.IGNORE:
        steps.append((attrgetter("pid"), criteria.pid))
    if criteria.title is not SortDirection.IGNORE:
        steps.append((_title_key(case_sensitive), criteria.title))
    for axis, direction in criteria.position:
        if direction is not SortDirection.IGNORE:
            steps.append((_AXIS_KEYS[axis], direction))
    return steps


def sort_records(
    records: Iterable[WindowRecord],
    criteria: SortCriteria,
    *,
    case_sensitive: bool = False,
) -> list[WindowRecord]:
    """
    Returns a new list ordered by `criteria`.

    Python's sort is stable, so sorting by the lowest priority key first and
    the highest priority key last yields the lexicographic multi-key order.
    Seeding the passes with an `index` sort gives the final tie-break.
    """
    steps = _active_steps(criteria, case_sensitive)
    if not steps:
        return list(records)

    ordered = sorted(records, key=attrgetter("index"))
    for key, direction in reversed(steps):
        ordered.sort(key=key, reverse=direction is SortDirection.DESCENDING)

    log_debug(logger, f"Sorted {len(ordered)} windows by {criteria}.")
    return ordered


def _parse_axis_token(token: str) -> AxisOrder:
    try:
        axis = Axis(token[0])
    except ValueError:
        raise ParseError(ParseErrorReason.UNKNOWN_AXIS, token) from None

    suffix = token[1:].strip()
    if suffix in _ASCENDING_SUFFIXES:
        return axis, SortDirection.ASCENDING
    if suffix in _DESCENDING_SUFFIXES:
        return axis, SortDirection.DESCENDING
    raise ParseError(ParseErrorReason.INVALID_DIRECTION, token)


def parse_position_sort(text: str) -> tuple[AxisOrder, ...]:
    """
    Parses a position sort string into (axis, direction) pairs in priority order.

    Examples:
        >>> parse_position_sort("x1|y-1")
        ((<Axis.X: 'x'>, <SortDirection.ASCENDING: 1>), (<Axis.Y: 'y'>, <SortDirection.DESCENDING: -1>))

    Raises:
        ParseError: EMPTY_INPUT, UNKNOWN_AXIS, TOO_MANY_AXES, DUPLICATE_AXIS
            or INVALID_DIRECTION. Nothing is returned on error.
    """
    normalized = text.strip().lower()
    if not normalized:
        raise ParseError(ParseErrorReason.EMPTY_INPUT, text)

    tokens = [part.strip() for part in normalized.split("|")]
    if len(tokens) > MAX_POSITION_AXES:
        raise ParseError(ParseErrorReason.TOO_MANY_AXES, text)

    orders: list[AxisOrder] = []
    seen: set[Axis] = set()
    for token in tokens:
        if not token:
            raise ParseError(ParseErrorReason.EMPTY_INPUT, text)
        axis, direction = _parse_axis_token(token)
        if axis in seen:
            raise ParseError(ParseErrorReason.DUPLICATE_AXIS, token)
        seen.add(axis)
        orders.append((axis, direction))
    return tuple(orders)


def parse_sort_direction(text: str | int | None) -> SortDirection:
    """
    Maps the signed-integer order used on the command line and in query
    strings ("1", "-1", "0") or a word ("asc", "desc", "none") to a direction.
    """
    if text is None:
        return SortDirection.IGNORE
    key = str(text).strip().lower()
    try:
        return _DIRECTION_WORDS[key]
    except KeyError:
        raise ParseError(ParseErrorReason.INVALID_DIRECTION, str(text)) from None


def parse_sort_criteria(
    pid: str | int | None = None,
    title: str | int | None = None,
    position: str | None = None,
) -> SortCriteria:
    """Builds `SortCriteria` from textual directions and a position sort string."""
    return SortCriteria(
        pid=parse_sort_direction(pid),
        title=parse_sort_direction(title),
        position=parse_position_sort(position) if position and position.strip() else (),
    )
