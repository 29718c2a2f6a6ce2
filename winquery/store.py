"""
store.py - Immutable window snapshots and the store that owns the current one.

A `Snapshot` is a tuple of `WindowRecord` with indices 1..N in provider order.
`WindowStore` holds a reference to the current snapshot and swaps it under a
lock on refresh; readers keep whatever snapshot they already hold.
"""
from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Sequence

from winquery.errors import ProviderError
from winquery.logger import get_logger
from winquery.models import FilterCriteria, RawWindow, Selection, SortCriteria, WindowRecord
from winquery import filtering, pipeline, selection as selection_mod, sorting
from winquery.window import EnumerationProvider

logger = get_logger(__name__)


class Snapshot(Sequence[WindowRecord]):
    """Ordered, immutable collection of the windows seen by one enumeration."""

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[WindowRecord] = ()):
        self._records: tuple[WindowRecord, ...] = tuple(records)

    def __getitem__(self, i):
        return self._records[i]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WindowRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"Snapshot({len(self._records)} windows)"

    def lookup_by_index(self, index: int) -> WindowRecord | None:
        """Returns the record with 1-based `index`, or None when out of bounds."""
        if not 1 <= index <= len(self._records):
            return None
        return self._records[index - 1]


def snapshot(provider_output: Iterable[RawWindow | Sequence]) -> Snapshot:
    """
    Builds a snapshot from provider rows, numbering them 1..N in the order given.

    Rows may be `RawWindow` instances or plain tuples in the same field order
    (handle, title, class_name, pid, process_name, process_file_path, x, y).
    """
    records = []
    for position, row in enumerate(provider_output, start=1):
        raw = row if isinstance(row, RawWindow) else RawWindow(*row)
        records.append(WindowRecord.from_raw(raw, position))
    return Snapshot(records)


class WindowStore:
    """
    Owns the current snapshot and exposes the query surface over it.

    Args:
        provider: Enumeration provider used by `refresh()` when none is passed.
        case_sensitive: Substring/title comparison policy for queries run
            through the store.
    """

    def __init__(self, provider: EnumerationProvider | None = None, case_sensitive: bool = False):
        self._provider = provider
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self.case_sensitive = case_sensitive

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    def replace(self, new_snapshot: Snapshot) -> Snapshot:
        """Atomically installs `new_snapshot` and returns the one it replaced."""
        with self._lock:
            previous, self._snapshot = self._snapshot, new_snapshot
        logger.debug(f"Snapshot replaced: {len(previous)} -> {len(new_snapshot)} windows")
        return previous

    def refresh(self, provider: EnumerationProvider | None = None) -> Snapshot:
        """
        Re-enumerates windows and installs the result as the current snapshot.

        Raises:
            ProviderError: Propagated unchanged from the provider. The current
                snapshot is left as it was.
            ValueError: If no provider was given here or at construction.
        """
        active_provider = provider if provider is not None else self._provider
        if active_provider is None:
            raise ValueError("No enumeration provider configured for this store.")

        try:
            rows = active_provider.enumerate()
        except ProviderError as e:
            logger.error(f"Window enumeration failed: {e!s}")
            raise

        new_snapshot = snapshot(rows)
        self.replace(new_snapshot)
        logger.info(f"Snapshot refreshed with {len(new_snapshot)} windows.")
        return new_snapshot

    def lookup_by_index(self, index: int) -> WindowRecord | None:
        return self._snapshot.lookup_by_index(index)

    # --- Query surface over the current snapshot ---

    def filter(self, criteria: FilterCriteria) -> list[WindowRecord]:
        return filtering.filter_records(self._snapshot, criteria, case_sensitive=self.case_sensitive)

    def find_by_title(self, title_substring: str) -> list[WindowRecord]:
        return self.filter(FilterCriteria(title_contains=title_substring))

    def sort(self, criteria: SortCriteria) -> list[WindowRecord]:
        return sorting.sort_records(self._snapshot, criteria, case_sensitive=self.case_sensitive)

    def select(self, selection: Selection) -> list[WindowRecord]:
        return selection_mod.apply_selection(self._snapshot, selection)

    def run(
        self,
        filter_criteria: FilterCriteria | None = None,
        sort_criteria: SortCriteria | None = None,
        selection: Selection | None = None,
    ) -> list[WindowRecord]:
        return pipeline.run(
            self._snapshot, filter_criteria, sort_criteria, selection,
            case_sensitive=self.case_sensitive,
        )
