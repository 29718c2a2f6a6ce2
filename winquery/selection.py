"""
selection.py - Index/range selection grammar.

    selection := "all" | token ("," token)*
    token     := INTEGER | INTEGER "-" INTEGER

Indices are 1-based. Overlapping tokens are merged, the result is ascending.
"all" is resolved against whatever sequence the selection is applied to.
"""
from __future__ import annotations

from collections.abc import Sequence

from winquery.errors import ParseError, ParseErrorReason
from winquery.logger import get_logger, log_debug
from winquery.models import Selection, WindowRecord

logger = get_logger(__name__)

ALL_KEYWORD = "all"


def _parse_index(text: str, token: str) -> int:
    if not text:
        raise ParseError(ParseErrorReason.INVALID_RANGE, token)
    if not text.isdigit() or not text.isascii():
        raise ParseError(ParseErrorReason.INVALID_INDEX, token)
    try:
        value = int(text)
    except ValueError:
        # more digits than int() converts; no window list is that long
        raise ParseError(ParseErrorReason.INVALID_INDEX, token) from None
    if value < 1:
        raise ParseError(ParseErrorReason.NON_POSITIVE_INDEX, token)
    return value


def _parse_token(token: str) -> tuple[int, int]:
    if token.startswith("-") and token[1:].lstrip()[:1].isdigit():
        # "-3" and "-3-5" start with a negative index, not a missing range start
        raise ParseError(ParseErrorReason.NON_POSITIVE_INDEX, token)

    if "-" not in token:
        index = _parse_index(token, token)
        return index, index

    parts = [part.strip() for part in token.split("-")]
    if len(parts) != 2:
        raise ParseError(ParseErrorReason.INVALID_RANGE, token)
    start = _parse_index(parts[0], token)
    end = _parse_index(parts[1], token)
    if start > end:
        raise ParseError(ParseErrorReason.INVALID_RANGE, token)
    return start, end


def parse_selection(text: str) -> Selection:
    """
    Parses a selection string such as "all", "3", "1,3,5-7".

    Raises:
        ParseError: EMPTY_INPUT, INVALID_INDEX, NON_POSITIVE_INDEX or
            INVALID_RANGE, carrying the offending token.
    """
    stripped = text.strip()
    if not stripped:
        raise ParseError(ParseErrorReason.EMPTY_INPUT, text)
    if stripped == ALL_KEYWORD:
        return Selection.all()

    ranges = []
    for raw_token in stripped.split(","):
        token = raw_token.strip()
        if not token:
            raise ParseError(ParseErrorReason.EMPTY_INPUT, text)
        ranges.append(_parse_token(token))

    selection = Selection.from_ranges(ranges)
    log_debug(logger, f"Parsed selection '{text}' as {selection}.")
    return selection


def apply_selection(records: Sequence[WindowRecord], selection: Selection) -> list[WindowRecord]:
    """
    Picks the selected 1-based positions out of `records`.

    Indices past the end of `records` are skipped. Output follows ascending
    index order regardless of the order tokens were written in.
    """
    return [records[index - 1] for index in selection.resolve(len(records))]
