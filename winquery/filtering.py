"""
filtering.py - Criteria-based window matching.

`matches` is a pure predicate; `filter_records` keeps matching records in
input order. Substring tests are case-insensitive unless `case_sensitive=True`.
"""
from __future__ import annotations

from collections.abc import Iterable

from winquery.logger import get_logger, log_debug
from winquery.models import FilterCriteria, WindowRecord

logger = get_logger(__name__)

# criteria field -> record attribute it is tested against
_SUBSTRING_FIELDS: tuple[tuple[str, str], ...] = (
    ("title_contains", "title"),
    ("class_name_contains", "class_name"),
    ("process_name_contains", "process_name"),
    ("process_file_contains", "process_file_path"),
)


def _contains(haystack: str, needle: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return needle in haystack
    return needle.casefold() in haystack.casefold()


def matches(record: WindowRecord, criteria: FilterCriteria, *, case_sensitive: bool = False) -> bool:
    """Returns True when `record` satisfies every constraint set in `criteria`."""
    if criteria.pid is not None and record.pid != criteria.pid:
        return False

    for criteria_field, record_field in _SUBSTRING_FIELDS:
        needle = getattr(criteria, criteria_field)
        if needle is None:
            continue
        if not _contains(getattr(record, record_field), needle, case_sensitive):
            return False

    return True


def filter_records(
    records: Iterable[WindowRecord],
    criteria: FilterCriteria,
    *,
    case_sensitive: bool = False,
) -> list[WindowRecord]:
    """Returns the records matching `criteria`, preserving input order."""
    if criteria.is_empty():
        return list(records)

    result = [r for r in records if matches(r, criteria, case_sensitive=case_sensitive)]
    log_debug(logger, f"Filter {criteria} kept {len(result)} windows.")
    return result
