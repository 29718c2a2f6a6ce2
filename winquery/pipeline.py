"""
pipeline.py - Filter -> sort -> select composition.

Selection indices address positions in the filtered and sorted result, so a
caller can ask for "the first two Chrome windows, leftmost first" without
knowing snapshot indices.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from winquery.filtering import filter_records
from winquery.models import FilterCriteria, Selection, SortCriteria, WindowRecord
from winquery.selection import apply_selection, parse_selection
from winquery.sorting import parse_sort_criteria, sort_records


def run(
    records: Sequence[WindowRecord],
    filter_criteria: FilterCriteria | None = None,
    sort_criteria: SortCriteria | None = None,
    selection: Selection | None = None,
    *,
    case_sensitive: bool = False,
) -> list[WindowRecord]:
    """Runs the query stages in fixed order; an omitted stage passes records through."""
    result: list[WindowRecord] = list(records)
    if filter_criteria is not None:
        result = filter_records(result, filter_criteria, case_sensitive=case_sensitive)
    if sort_criteria is not None:
        result = sort_records(result, sort_criteria, case_sensitive=case_sensitive)
    if selection is not None:
        result = apply_selection(result, selection)
    return result


@dataclass(frozen=True, slots=True)
class Query:
    """A reusable bundle of the three optional pipeline stages."""
    filter: FilterCriteria | None = None
    sort: SortCriteria | None = None
    selection: Selection | None = None

    @classmethod
    def parse(
        cls,
        *,
        pid: int | None = None,
        title: str | None = None,
        class_name: str | None = None,
        process_name: str | None = None,
        process_file: str | None = None,
        sort_pid: str | None = None,
        sort_title: str | None = None,
        sort_position: str | None = None,
        select: str | None = None,
    ) -> Query:
        """
        Builds a query from textual parameters as they arrive from a URL or
        the command line.

        A blank sort or selection string counts as not given.

        Raises:
            ParseError: If a sort direction, position sort or selection
                string is malformed.
        """
        filter_criteria = FilterCriteria(
            pid=pid,
            title_contains=title,
            class_name_contains=class_name,
            process_name_contains=process_name,
            process_file_contains=process_file,
        )
        sort_criteria = parse_sort_criteria(pid=sort_pid, title=sort_title, position=sort_position)
        return cls(
            filter=None if filter_criteria.is_empty() else filter_criteria,
            sort=sort_criteria if sort_criteria.is_active() else None,
            selection=parse_selection(select) if select and select.strip() else None,
        )

    def run(self, records: Sequence[WindowRecord], *, case_sensitive: bool = False) -> list[WindowRecord]:
        return run(records, self.filter, self.sort, self.selection, case_sensitive=case_sensitive)
